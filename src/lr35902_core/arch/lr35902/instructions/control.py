"""
LR35902 制御命令（分岐、コール/リターン、システム制御、CBプレフィックス）の実装。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus
from .base import (
    check_condition, fetch_byte, fetch_signed_byte, fetch_word, push_word, pop_word
)

# --- Execution Functions ---

def execute_nop(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    # Intentional: NOP (No Operation)
    state.set_cycles(1)

# @intent:responsibility HALTを記録します。実際の停止と復帰は割り込みコントローラの責務です。
def execute_halt(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.halted = True
    state.set_cycles(1)

def execute_stop(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """STOP (0x10 0x00): 2バイト命令。後続のパディングバイトを読み飛ばします。"""
    fetch_byte(state, bus)
    state.stopped = True
    state.set_cycles(1)

def execute_di(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.ime = False
    state.set_cycles(1)

def execute_ei(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.ime = True
    state.set_cycles(1)

def execute_jp_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.pc = fetch_word(state, bus)
    state.set_cycles(4)

def execute_jp_cc_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    # オペランドは条件の成否に関わらず読み込む
    target = fetch_word(state, bus)
    if check_condition(state, (opcode >> 3) & 0b11):
        state.pc = target
        state.set_cycles(4)
    else:
        state.set_cycles(3)

def execute_jp_hl(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.pc = state.hl
    state.set_cycles(1)

def execute_jr_e(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    offset = fetch_signed_byte(state, bus)
    # Note: PC already points past the operand, so the offset is relative to the next instruction
    state.pc = (state.pc + offset) & 0xFFFF
    state.set_cycles(3)

def execute_jr_cc_e(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    offset = fetch_signed_byte(state, bus)
    if check_condition(state, (opcode >> 3) & 0b11):
        state.pc = (state.pc + offset) & 0xFFFF
        state.set_cycles(3)
    else:
        state.set_cycles(2)

def execute_call_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    # CALL nn: Push return address (PC after operands) to stack, then jump
    target = fetch_word(state, bus)
    push_word(state, bus, state.pc)
    state.pc = target
    state.set_cycles(6)

def execute_call_cc_nn(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    target = fetch_word(state, bus)
    if check_condition(state, (opcode >> 3) & 0b11):
        push_word(state, bus, state.pc)
        state.pc = target
        state.set_cycles(6)
    else:
        state.set_cycles(3)

def execute_ret(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    state.pc = pop_word(state, bus)
    state.set_cycles(4)

def execute_ret_cc(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    if check_condition(state, (opcode >> 3) & 0b11):
        state.pc = pop_word(state, bus)
        state.set_cycles(5)
    else:
        state.set_cycles(2)

def execute_reti(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """RETI: RETと同時にIMEを有効化します。"""
    state.pc = pop_word(state, bus)
    state.ime = True
    state.set_cycles(4)

def execute_rst(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """RST n: 飛び先はオペコードのビット5-3 × 8 (0x00, 0x08, ... 0x38) です。"""
    push_word(state, bus, state.pc)
    state.pc = opcode & 0x38
    state.set_cycles(4)

# @intent:responsibility 0xCB プレフィックスの後続バイトを読み込み、CB命令テーブルで実行します。
def execute_cb(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    cb_opcode = fetch_byte(state, bus)
    # maps imports this module, so the table is resolved at call time
    from .maps import CB_EXECUTE_MAP
    CB_EXECUTE_MAP[cb_opcode](state, bus, cb_opcode)
