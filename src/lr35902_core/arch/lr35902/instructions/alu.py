"""
LR35902 算術論理演算 (ALU) 命令の実装。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus
from lr35902_core.arch.lr35902.alu import (
    update_flags_add8, update_flags_sub8, update_flags_logic8,
    update_flags_inc_dec8, update_flags_add16, add_sp_offset, rotate_shift8, decimal_adjust
)
from .base import (
    get_register_name, get_register_value, set_register_value, get_rr_reg_name,
    fetch_byte, fetch_signed_byte
)

ALU_OP_NAMES = ["ADD A,", "ADC A,", "SUB ", "SBC A,", "AND ", "XOR ", "OR ", "CP "]

# @intent:responsibility Aレジスタと値に対して8種類のALU演算のいずれかを適用します。
# @intent:pre-condition op_typeはオペコードのビット5-3 (0: ADD ... 7: CP) です。
def _apply_alu_op(state: Lr35902CpuState, op_type: int, val: int) -> None:
    a = state.a
    if op_type == 0b000: # ADD
        result = a + val
        update_flags_add8(state, a, val, result)
        state.a = result & 0xFF
    elif op_type == 0b001: # ADC
        carry = 1 if state.flag_c else 0
        result = a + val + carry
        update_flags_add8(state, a, val, result, carry_in=carry)
        state.a = result & 0xFF
    elif op_type == 0b010: # SUB
        result = a - val
        update_flags_sub8(state, a, val, result)
        state.a = result & 0xFF
    elif op_type == 0b011: # SBC
        borrow = 1 if state.flag_c else 0
        result = a - val - borrow
        update_flags_sub8(state, a, val, result, borrow_in=borrow)
        state.a = result & 0xFF
    elif op_type == 0b100: # AND
        state.a = a & val
        update_flags_logic8(state, state.a, h_flag=True)
    elif op_type == 0b101: # XOR
        state.a = a ^ val
        update_flags_logic8(state, state.a)
    elif op_type == 0b110: # OR
        state.a = a | val
        update_flags_logic8(state, state.a)
    else: # CP
        # CP does not store the result
        update_flags_sub8(state, a, val, a - val)

# --- Execution Functions ---

def execute_alu_r(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """ADD/ADC/SUB/SBC/AND/XOR/OR/CP r (0x80-0xBF) を実行します。"""
    src_name = get_register_name(opcode & 0b111)
    val = get_register_value(state, bus, src_name)
    _apply_alu_op(state, (opcode >> 3) & 0b111, val)
    state.set_cycles(2 if src_name == "(HL)" else 1)

def execute_alu_n(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """ADD/ADC/SUB/SBC/AND/XOR/OR/CP d8 (0xC6-0xFE) を実行します。"""
    n = fetch_byte(state, bus)
    _apply_alu_op(state, (opcode >> 3) & 0b111, n)
    state.set_cycles(2)

def execute_inc_dec8(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    reg_name = get_register_name((opcode >> 3) & 0b111)
    is_inc = (opcode & 1) == 0
    val = get_register_value(state, bus, reg_name)
    result = ((val + 1) if is_inc else (val - 1)) & 0xFF
    update_flags_inc_dec8(state, val, result, is_inc)
    set_register_value(state, bus, reg_name, result)
    state.set_cycles(3 if reg_name == "(HL)" else 1)

def execute_inc_dec16(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """INC rr / DEC rr を実行します。フラグは変化しません。"""
    rr_name = get_rr_reg_name((opcode >> 4) & 0b11).lower()
    delta = 1 if (opcode & 0x0F) == 0x03 else -1
    setattr(state, rr_name, (getattr(state, rr_name) + delta) & 0xFFFF)
    state.set_cycles(2)

def execute_add_hl_rr(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    rr_name = get_rr_reg_name((opcode >> 4) & 0b11).lower()
    val = getattr(state, rr_name)
    result = state.hl + val
    update_flags_add16(state, state.hl, val, result)
    state.hl = result & 0xFFFF
    state.set_cycles(2)

def execute_add_sp_e(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """ADD SP,r8 (0xE8) を実行します。"""
    offset = fetch_signed_byte(state, bus)
    state.sp = add_sp_offset(state, offset)
    state.set_cycles(4)

def execute_rotate_a(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """RLCA/RRCA/RLA/RRA を実行します。CB版と異なり、Zフラグは常にクリアされます。"""
    op_index = (opcode >> 3) & 0b11 # 0: RLCA, 1: RRCA, 2: RLA, 3: RRA
    state.a = rotate_shift8(state, state.a, op_index)
    state.flag_z = False
    state.set_cycles(1)

def execute_daa(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    decimal_adjust(state)
    state.set_cycles(1)

def execute_cpl(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """CPL: Aのビット反転。Z, Cは保持されます。"""
    state.a = (~state.a) & 0xFF
    state.set_flags(z=state.flag_z, n=True, h=True, c=state.flag_c)
    state.set_cycles(1)

def execute_scf(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.set_flags(z=state.flag_z, n=False, h=False, c=True)
    state.set_cycles(1)

def execute_ccf(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.set_flags(z=state.flag_z, n=False, h=False, c=not state.flag_c)
    state.set_cycles(1)
