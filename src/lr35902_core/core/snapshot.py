# lr35902_core/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令の実行結果としてのCPUとバスの状態を記録した不変のデータ構造を定義します。
トレース出力と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from lr35902_core.core.state import CpuState
from lr35902_core.transport.bus import BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    サイクル数は条件分岐の成否で変わるため、ここでは保持せず実行後の状態から取得します。
    """
    opcode_hex: str # 例: "C3" / "CB7C"
    mnemonic: str # 例: "JP"
    operands: List[str] = field(default_factory=list) # 例: ["$1234"]
    operand_bytes: List[int] = field(default_factory=list) # 生のオペランドバイト
    length: int = 1 # 命令のバイト長

    # @intent:responsibility アセンブリ言語形式の1行 (例: "LD A,($C000)") を返します。
    @property
    def text(self) -> str:
        if not self.operands:
            return self.mnemonic
        return f"{self.mnemonic} {','.join(self.operands)}"

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    m_cycles: int
    t_cycles: int
    symbol_info: Optional[str] = None # 例: "LD A,($C000)"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令実行後のCPU状態のコピー、実行された命令、メタデータ、
    およびその命令の間に発生したバスアクセスを記録します。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
