# lr35902_core/arch/lr35902/state.py
"""
LR35902 CPU固有の状態定義。

このモジュールは、LR35902のレジスタ、フラグ、直前の命令のサイクル数を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

from lr35902_core.core.state import CpuState

# LR35902フラグビットマスク
# @intent:constant Fレジスタ内の各フラグビットの位置を定義します。下位4ビットは常に0です。
Z_FLAG = 0b10000000  # Zero (ゼロ)
N_FLAG = 0b01000000  # Subtract (減算)
H_FLAG = 0b00100000  # Half Carry (ハーフキャリー)
C_FLAG = 0b00010000  # Carry (キャリー)
FLAG_MASK = Z_FLAG | N_FLAG | H_FLAG | C_FLAG

# @intent:constant 1マシンサイクルあたりのクロックティック数。
TICKS_PER_CYCLE = 4


# @intent:responsibility LR35902の全てのレジスタとフラグ、直前の命令のサイクル数を保持します。
@dataclass
class Lr35902CpuState(CpuState):
    """
    LR35902のレジスタ状態を保持するデータクラス。
    CpuStateを拡張し、8ビットレジスタ、フラグ、直前の命令のM/Tサイクル数を含みます。
    """
    # Main registers
    a: int = 0x00
    b: int = 0x00
    c: int = 0x00
    d: int = 0x00
    e: int = 0x00
    h: int = 0x00
    l: int = 0x00
    f: int = 0x00  # Flag register

    # Last instruction cost
    m: int = 0  # Machine cycles
    t: int = 0  # Clock ticks

    # @intent:rationale 以下は割り込みコントローラ（外部コンポーネント）向けのラッチであり、
    #                  このコア自身はこれらの値によって実行を止めたりしません。
    ime: bool = False      # Interrupt Master Enable (EI/DI/RETI)
    halted: bool = False   # HALT executed
    stopped: bool = False  # STOP executed

    # @intent:responsibility 4つのフラグをまとめて上書きします（クリアしてからセット）。
    def set_flags(self, z: bool, n: bool, h: bool, c: bool) -> None:
        self.f = (
            (Z_FLAG if z else 0)
            | (N_FLAG if n else 0)
            | (H_FLAG if h else 0)
            | (C_FLAG if c else 0)
        )

    # @intent:responsibility 直前の命令のサイクル数を記録します。T = 4 * M は常に成り立ちます。
    def set_cycles(self, m: int) -> None:
        self.m = m
        self.t = m * TICKS_PER_CYCLE

    # @intent:accessor Fレジスタの各フラグビットにアクセスするためのプロパティを提供します。

    @property
    def flag_z(self) -> bool:
        return (self.f & Z_FLAG) != 0

    @flag_z.setter
    def flag_z(self, value: bool) -> None:
        if value:
            self.f |= Z_FLAG
        else:
            self.f &= ~Z_FLAG & 0xFF

    @property
    def flag_n(self) -> bool:
        return (self.f & N_FLAG) != 0

    @flag_n.setter
    def flag_n(self, value: bool) -> None:
        if value:
            self.f |= N_FLAG
        else:
            self.f &= ~N_FLAG & 0xFF

    @property
    def flag_h(self) -> bool:
        return (self.f & H_FLAG) != 0

    @flag_h.setter
    def flag_h(self, value: bool) -> None:
        if value:
            self.f |= H_FLAG
        else:
            self.f &= ~H_FLAG & 0xFF

    @property
    def flag_c(self) -> bool:
        return (self.f & C_FLAG) != 0

    @flag_c.setter
    def flag_c(self, value: bool) -> None:
        if value:
            self.f |= C_FLAG
        else:
            self.f &= ~C_FLAG & 0xFF

    # 16-bit register pairs
    @property
    def af(self) -> int:
        return (self.a << 8) | self.f

    @af.setter
    def af(self, value: int) -> None:
        self.a = (value >> 8) & 0xFF
        self.f = value & FLAG_MASK

    @property
    def bc(self) -> int:
        return (self.b << 8) | self.c

    @bc.setter
    def bc(self, value: int) -> None:
        self.b = (value >> 8) & 0xFF
        self.c = value & 0xFF

    @property
    def de(self) -> int:
        return (self.d << 8) | self.e

    @de.setter
    def de(self, value: int) -> None:
        self.d = (value >> 8) & 0xFF
        self.e = value & 0xFF

    @property
    def hl(self) -> int:
        return (self.h << 8) | self.l

    @hl.setter
    def hl(self, value: int) -> None:
        self.h = (value >> 8) & 0xFF
        self.l = value & 0xFF
