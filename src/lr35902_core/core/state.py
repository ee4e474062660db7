# lr35902_core/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, fields

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer
    # @intent:rationale 初期値は0x0000とする。LR35902はリセット後にアドレス0から実行を開始するため。

    # @intent:responsibility 全フィールドをデフォルト値（ゼロ）に戻します。
    # @intent:post-condition 何度呼び出しても同じ状態になります（冪等）。
    def reset(self) -> None:
        """
        全てのレジスタをデータクラスのデフォルト値に戻します。
        サブクラスで追加されたフィールドも対象になります。
        """
        for f in fields(self):
            setattr(self, f.name, f.default)

    # @intent:responsibility 別の状態オブジェクトの全フィールドをこのオブジェクトに書き戻します。
    def restore(self, other: "CpuState") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))
