# lr35902_core/arch/lr35902/cpu.py
"""
LR35902 CPUエミュレーションの中心モジュール。

このモジュールはLR35902 CPUの具体的な実装を提供し、
AbstractCpuインターフェースを実装します。
"""
from typing import Dict, List, Optional, Tuple

from lr35902_core.core.cpu import AbstractCpu
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus
from lr35902_core.core.snapshot import Operation
from lr35902_core.arch.lr35902.instructions import decode_opcode, execute_opcode
from lr35902_core.arch.lr35902 import disassembler

# @intent:responsibility LR35902 CPUの具体的なエミュレーションロジックを提供します。
class Lr35902Cpu(AbstractCpu):
    """
    LR35902 CPUをエミュレートするクラス。
    AbstractCpuを継承し、LR35902固有の動作を実装します。
    """
    # @intent:responsibility Lr35902Cpuの初期化を行います。
    # @intent:pre-condition `bus`を省略した場合、ゼロで埋められた64KiBのMemoryBusを生成して接続します。
    def __init__(self, bus: Optional[MemoryBus] = None):
        super().__init__(bus if bus is not None else MemoryBus())

    # @intent:responsibility LR35902 CPUの初期状態（全レジスタ0）を生成します。
    def _create_initial_state(self) -> Lr35902CpuState:
        return Lr35902CpuState()

    # @intent:rationale 実際のデコードロジックは`instructions`パッケージに委譲します。
    def _decode(self, opcode: int, pc: int) -> Operation:
        return decode_opcode(opcode, self._bus, pc)

    # @intent:rationale 実際の実行ロジックは`instructions`パッケージに委譲します。
    def _execute(self, opcode: int) -> None:
        execute_opcode(self._state, self._bus, opcode)

    def _last_cycles(self) -> Tuple[int, int]:
        return self._state.m, self._state.t

    # @intent:responsibility オペコード1つ分の命令を実行します。フェッチもデコードも行いません。
    # @intent:pre-condition PCは既にオペコードの直後を指している必要があります。
    def execute_opcode(self, opcode: int) -> None:
        """
        指定されたオペコードの命令を現在の状態に対して実行します。
        インラインオペランドはPCの位置から読み込まれます。
        累積クロックは進めません（`step()`のみがクロックを進めます）。
        """
        self._execute(opcode)

    # --- 代表的な命令 ---

    def add_r_e(self) -> None:
        """ADD A,E (0x83)"""
        self.execute_opcode(0x83)

    def cp_r_b(self) -> None:
        """CP B (0xB8)"""
        self.execute_opcode(0xB8)

    def nop(self) -> None:
        self.execute_opcode(0x00)

    def push_b_c(self) -> None:
        """PUSH BC (0xC5)"""
        self.execute_opcode(0xC5)

    def pop_h_l(self) -> None:
        """POP HL (0xE1)"""
        self.execute_opcode(0xE1)

    def ld_a_mm(self) -> None:
        """LD A,(a16) (0xFA): PCの位置から2バイトのアドレスを読み込みます。"""
        self.execute_opcode(0xFA)

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        return {
            "A": s.a, "F": s.f, "B": s.b, "C": s.c, "D": s.d, "E": s.e, "H": s.h, "L": s.l,
            "SP": s.sp, "PC": s.pc,
            "AF": s.af, "BC": s.bc, "DE": s.de, "HL": s.hl,
        }

    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "Z": s.flag_z,
            "N": s.flag_n,
            "H": s.flag_h,
            "C": s.flag_c,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
