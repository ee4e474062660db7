"""
LR35902 CBプレフィックス命令（ローテート、シフト、SWAP、ビット操作）の実装。

サイクル数はプレフィックスバイトのフェッチを含んだ値です。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus
from lr35902_core.arch.lr35902.alu import rotate_shift8
from .base import get_register_name, get_register_value, set_register_value

SHIFT_OP_NAMES = ["RLC", "RRC", "RL", "RR", "SLA", "SRA", "SWAP", "SRL"]

# --- Execution Functions ---

def execute_rotate_shift(state: Lr35902CpuState, bus: MemoryBus, cb_opcode: int) -> None:
    """RLC/RRC/RL/RR/SLA/SRA/SWAP/SRL r (CB 0x00-0x3F) を実行します。"""
    reg_name = get_register_name(cb_opcode & 0b111)
    val = get_register_value(state, bus, reg_name)
    result = rotate_shift8(state, val, (cb_opcode >> 3) & 0b111)
    set_register_value(state, bus, reg_name, result)
    state.set_cycles(4 if reg_name == "(HL)" else 2)

def execute_bit(state: Lr35902CpuState, bus: MemoryBus, cb_opcode: int) -> None:
    """BIT b,r (CB 0x40-0x7F): Z = ビットbの反転、N=0、H=1、Cは保持されます。"""
    reg_name = get_register_name(cb_opcode & 0b111)
    bit_index = (cb_opcode >> 3) & 0b111
    val = get_register_value(state, bus, reg_name)
    state.set_flags(z=(val & (1 << bit_index)) == 0, n=False, h=True, c=state.flag_c)
    state.set_cycles(3 if reg_name == "(HL)" else 2)

def execute_res_set(state: Lr35902CpuState, bus: MemoryBus, cb_opcode: int) -> None:
    """RES b,r (CB 0x80-0xBF) / SET b,r (CB 0xC0-0xFF)。フラグは変化しません。"""
    reg_name = get_register_name(cb_opcode & 0b111)
    bit_index = (cb_opcode >> 3) & 0b111
    val = get_register_value(state, bus, reg_name)
    if cb_opcode & 0x40: # SET
        val |= (1 << bit_index)
    else: # RES
        val &= ~(1 << bit_index)
    set_register_value(state, bus, reg_name, val)
    state.set_cycles(4 if reg_name == "(HL)" else 2)
