"""
LR35902命令セット実装のための共通ヘルパー関数と定数。

命令関数は全て `(state, bus, opcode) -> None` の形を取ります。
ディスパッチャはオペコードの直後までPCを進めてから命令関数を呼び出し、
命令関数はインラインオペランドを読み込んだ分だけPCを進めます。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from lr35902_core.transport.bus import MemoryBus

# Helper functions for register mapping
REGISTER_CODES = {
    0b000: "B", 0b001: "C", 0b010: "D", 0b011: "E",
    0b100: "H", 0b101: "L", 0b110: "(HL)", 0b111: "A"
}

# @intent:utility_function 指定されたコードに対応するレジスタ名を返します。
def get_register_name(code: int) -> str:
    return REGISTER_CODES.get(code, "UNKNOWN_REG")

# @intent:utility_function レジスタ名（または(HL)）に基づいて現在の値を取得します。
def get_register_value(state: Lr35902CpuState, bus: MemoryBus, reg_name: str) -> int:
    if reg_name == "(HL)":
        return bus.read_byte(state.hl)
    return getattr(state, reg_name.lower())

# @intent:utility_function レジスタ名（または(HL)）に値を設定します。
def set_register_value(state: Lr35902CpuState, bus: MemoryBus, reg_name: str, value: int) -> None:
    if reg_name == "(HL)":
        bus.write_byte(state.hl, value & 0xFF)
    else:
        setattr(state, reg_name.lower(), value & 0xFF)

# @intent:utility_function PUSH/POP命令で使用されるレジスタペア名を返します。
def get_push_pop_reg_name(code: int) -> str:
    return {0b00: "BC", 0b01: "DE", 0b10: "HL", 0b11: "AF"}.get(code, "UNKNOWN")

# @intent:utility_function 16ビット演算で使用されるレジスタペア名(rr)を返します。
def get_rr_reg_name(code: int) -> str:
    return {0b00: "BC", 0b01: "DE", 0b10: "HL", 0b11: "SP"}.get(code, "UNKNOWN")

CONDITION_CODES = {0b00: "NZ", 0b01: "Z", 0b10: "NC", 0b11: "C"}

# @intent:utility_function 条件コード(cc)を現在のフラグで評価します。
def check_condition(state: Lr35902CpuState, cc_code: int) -> bool:
    if cc_code == 0b00:
        return not state.flag_z
    if cc_code == 0b01:
        return state.flag_z
    if cc_code == 0b10:
        return not state.flag_c
    return state.flag_c

# @intent:utility_function PCの位置から1バイトのオペランドを読み込み、PCを進めます。
def fetch_byte(state: Lr35902CpuState, bus: MemoryBus) -> int:
    value = bus.read_byte(state.pc)
    state.pc = (state.pc + 1) & 0xFFFF
    return value

# @intent:utility_function PCの位置から符号付き8ビットのオペランドを読み込みます。
def fetch_signed_byte(state: Lr35902CpuState, bus: MemoryBus) -> int:
    value = fetch_byte(state, bus)
    if value >= 128:
        value -= 256
    return value

# @intent:utility_function PCの位置から16ビットのオペランドを読み込み、PCを2進めます。
# @intent:rationale バスのワードアクセスと同じビッグエンディアン（上位バイトが先）で解釈します。
def fetch_word(state: Lr35902CpuState, bus: MemoryBus) -> int:
    high = fetch_byte(state, bus)
    low = fetch_byte(state, bus)
    return (high << 8) | low

# @intent:utility_function 16ビット値をスタックに積みます（上位バイトが先）。
# @intent:pre-condition 両方のアドレスを検査してから書き込むため、範囲外ならSPもメモリも変化しません。
def push_word(state: Lr35902CpuState, bus: MemoryBus, value: int) -> None:
    high_addr, low_addr = (state.sp - 1) & 0xFFFF, (state.sp - 2) & 0xFFFF
    bus.check_addresses(high_addr, low_addr)
    bus.write_byte(high_addr, (value >> 8) & 0xFF)
    bus.write_byte(low_addr, value & 0xFF)
    state.sp = low_addr

# @intent:utility_function スタックから16ビット値を取り出します（下位バイトが先）。
def pop_word(state: Lr35902CpuState, bus: MemoryBus) -> int:
    high_addr = (state.sp + 1) & 0xFFFF
    bus.check_addresses(state.sp, high_addr)
    low = bus.read_byte(state.sp)
    high = bus.read_byte(high_addr)
    state.sp = (state.sp + 2) & 0xFFFF
    return (high << 8) | low
