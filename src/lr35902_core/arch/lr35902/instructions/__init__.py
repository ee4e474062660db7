"""
LR35902命令セット実装パッケージ。
"""
import logging
from dataclasses import replace
from typing import List, Tuple

from lr35902_core.transport.bus import MemoryBus
from lr35902_core.core.snapshot import Operation
from lr35902_core.arch.lr35902.state import Lr35902CpuState
from .maps import EXECUTE_MAP, MNEMONIC_MAP, CB_MNEMONIC_MAP

logger = logging.getLogger(__name__)

# @intent:constant プレースホルダーとそのオペランドバイト数。
OPERAND_PLACEHOLDERS = {"d16": 2, "a16": 2, "d8": 1, "a8": 1, "r8": 1}


# @intent:responsibility 命令が割り当てられていないオペコードを通知します。
class UnknownOpcodeError(NotImplementedError):
    def __init__(self, opcode: int):
        super().__init__(f"Opcode {opcode:02X} is not defined on the LR35902.")
        self.opcode = opcode


# @intent:responsibility 1つのオペコードに対応する命令を実行します。
# @intent:pre-condition ディスパッチャは既にPCをオペコードの直後まで進めている必要があります。
def execute_opcode(state: Lr35902CpuState, bus: MemoryBus, opcode: int) -> None:
    """
    オペコードに対応する命令関数を呼び出します。
    命令はstateのm/tに消費サイクル数を記録します。未定義のオペコードはUnknownOpcodeErrorになります。
    範囲外アクセスでIndexErrorになった場合、レジスタは命令実行前の値に戻されます。
    メモリは各命令が書き込み前に全アドレスを検査するため変更されません。
    """
    executor = EXECUTE_MAP.get(opcode)
    if executor is None:
        logger.error("Undefined opcode %02X at PC %04X", opcode, (state.pc - 1) & 0xFFFF)
        raise UnknownOpcodeError(opcode)
    saved = replace(state)
    try:
        executor(state, bus, opcode)
    except IndexError:
        state.restore(saved)
        raise


# @intent:utility_function 整形済みの命令文字列をニーモニックとオペランドのリストに分割します。
def _split_instruction(text: str) -> Tuple[str, List[str]]:
    mnemonic, _, rest = text.partition(" ")
    return mnemonic, rest.split(",") if rest else []


# @intent:responsibility 与えられたオペコードをLR35902の命令としてデコードします。
# @intent:pre-condition `pc`はデコードするオペコードの先頭アドレスを指している必要があります。
def decode_opcode(opcode: int, bus: MemoryBus, pc: int) -> Operation:
    """
    LR35902のオペコードをデコードし、Operationオブジェクトを返します。
    オペランドの読み込みにはpeekを使用するため、バスアクセスログには残りません。
    未定義のオペコードはニーモニック"DB"の1バイト命令として返します。
    """
    if opcode == 0xCB:
        cb_opcode = bus.peek((pc + 1) & 0xFFFF)
        mnemonic, operands = _split_instruction(CB_MNEMONIC_MAP[cb_opcode])
        return Operation(
            opcode_hex=f"CB{cb_opcode:02X}",
            mnemonic=mnemonic,
            operands=operands,
            operand_bytes=[cb_opcode],
            length=2,
        )

    template = MNEMONIC_MAP.get(opcode)
    if template is None:
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="DB", operands=[f"${opcode:02X}"], length=1)

    placeholder = next((p for p in OPERAND_PLACEHOLDERS if p in template), None)
    if placeholder is None:
        mnemonic, operands = _split_instruction(template)
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic=mnemonic, operands=operands, length=1)

    size = OPERAND_PLACEHOLDERS[placeholder]
    operand_bytes = [bus.peek((pc + 1 + i) & 0xFFFF) for i in range(size)]
    length = 1 + size

    if size == 2:
        value = f"${(operand_bytes[0] << 8) | operand_bytes[1]:04X}"
    elif placeholder == "r8":
        offset = operand_bytes[0] - 256 if operand_bytes[0] >= 128 else operand_bytes[0]
        if template.startswith("JR"):
            # 相対ジャンプは飛び先アドレスで表示する
            value = f"${(pc + length + offset) & 0xFFFF:04X}"
        else:
            value = f"{'-' if offset < 0 else '+'}${abs(offset):02X}"
            template = template.replace("+r8", "r8")
    elif placeholder == "a8":
        value = f"$FF{operand_bytes[0]:02X}"
    else:
        value = f"${operand_bytes[0]:02X}"

    mnemonic, operands = _split_instruction(template.replace(placeholder, value))
    return Operation(
        opcode_hex=f"{opcode:02X}",
        mnemonic=mnemonic,
        operands=operands,
        operand_bytes=operand_bytes,
        length=length,
    )
