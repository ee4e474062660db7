"""
LR35902 データ転送命令の実装。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus
from lr35902_core.transport.memory_map import MEMORY_MAPPED_IO
from lr35902_core.arch.lr35902.alu import add_sp_offset
from .base import (
    get_register_name, get_register_value, set_register_value,
    get_push_pop_reg_name, get_rr_reg_name,
    fetch_byte, fetch_signed_byte, fetch_word, push_word, pop_word
)


# --- Execution Functions ---

def execute_ld_r_r_prime(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD r,r' (0x40-0x7F, 0x76を除く) を実行します。"""
    dest_name = get_register_name((opcode >> 3) & 0b111)
    src_name = get_register_name(opcode & 0b111)
    val = get_register_value(state, bus, src_name)
    set_register_value(state, bus, dest_name, val)
    state.set_cycles(2 if "(HL)" in (dest_name, src_name) else 1)

def execute_ld_r_n(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    reg_name = get_register_name((opcode >> 3) & 0b111)
    value = fetch_byte(state, bus)
    set_register_value(state, bus, reg_name, value)
    state.set_cycles(3 if reg_name == "(HL)" else 2)

def execute_ld_rr_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    rr_name = get_rr_reg_name((opcode >> 4) & 0b11).lower()
    setattr(state, rr_name, fetch_word(state, bus))
    state.set_cycles(3)

# @intent:responsibility (BC)/(DE)/(HL+)/(HL-) とAレジスタ間の転送を実行します。
def execute_ld_indirect_a(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """
    0x02/0x12/0x22/0x32: LD (rr),A
    0x0A/0x1A/0x2A/0x3A: LD A,(rr)
    HL+ / HL- はアクセス後にHLを増減します。
    """
    pair_code = (opcode >> 4) & 0b11
    if pair_code == 0b00:
        address = state.bc
    elif pair_code == 0b01:
        address = state.de
    else:
        address = state.hl

    if opcode & 0x08:
        state.a = bus.read_byte(address)
    else:
        bus.write_byte(address, state.a)

    if pair_code == 0b10:
        state.hl = (state.hl + 1) & 0xFFFF
    elif pair_code == 0b11:
        state.hl = (state.hl - 1) & 0xFFFF
    state.set_cycles(2)

def execute_ld_nn_sp(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD (a16),SP (0x08) を実行します。上位バイトをa16に、下位バイトをa16+1に格納します。"""
    address = fetch_word(state, bus)
    next_address = (address + 1) & 0xFFFF
    bus.check_addresses(address, next_address)
    bus.write_byte(address, (state.sp >> 8) & 0xFF)
    bus.write_byte(next_address, state.sp & 0xFF)
    state.set_cycles(5)

def execute_ld_a_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD A,(a16) (0xFA) を実行します。"""
    address = fetch_word(state, bus)
    state.a = bus.read_byte(address)
    state.set_cycles(4)

def execute_ld_nn_a(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD (a16),A (0xEA) を実行します。"""
    address = fetch_word(state, bus)
    bus.write_byte(address, state.a)
    state.set_cycles(4)

def execute_ldh(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LDH (a8),A (0xE0) / LDH A,(a8) (0xF0) を実行します。"""
    address = MEMORY_MAPPED_IO | fetch_byte(state, bus)
    if opcode == 0xF0:
        state.a = bus.read_byte(address)
    else:
        bus.write_byte(address, state.a)
    state.set_cycles(3)

def execute_ld_c(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD (C),A (0xE2) / LD A,(C) (0xF2) を実行します。"""
    address = MEMORY_MAPPED_IO | state.c
    if opcode == 0xF2:
        state.a = bus.read_byte(address)
    else:
        bus.write_byte(address, state.a)
    state.set_cycles(2)

def execute_ld_hl_sp_e(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """LD HL,SP+r8 (0xF8) を実行します。"""
    offset = fetch_signed_byte(state, bus)
    state.hl = add_sp_offset(state, offset)
    state.set_cycles(3)

def execute_ld_sp_hl(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.sp = state.hl
    state.set_cycles(2)

def execute_push_pop(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    reg_name = get_push_pop_reg_name((opcode >> 4) & 0b11).lower()
    is_push = (opcode & 0x0F) == 0x05

    if is_push:
        # PUSH: SP <- SP - 1, (SP) <- high; SP <- SP - 1, (SP) <- low
        push_word(state, bus, getattr(state, reg_name))
    else:
        # POP: low <- (SP), SP <- SP + 1; high <- (SP), SP <- SP + 1
        # POP AF はafセッターによりFの下位4ビットがクリアされる
        setattr(state, reg_name, pop_word(state, bus))
    state.set_cycles(3)
