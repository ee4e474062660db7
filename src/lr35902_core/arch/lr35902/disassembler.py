"""
LR35902逆アセンブラモジュール。

メモリ上のバイナリデータを命令単位に区切り、アドレス・命令バイト列・ニーモニックの行に変換します。
全ての読み込みはpeekで行うため、バスアクセスログには影響しません。
"""
from typing import Iterator, List, Tuple

from lr35902_core.transport.bus import ADDRESS_SPACE_SIZE, MemoryBus
from lr35902_core.arch.lr35902.instructions import decode_opcode

# @intent:constant 命令を読み取れなかったアドレスの表示。
UNREADABLE_ROW = ("??", "ERR")

DisassemblyRow = Tuple[int, str, str]


# @intent:responsibility 1命令分のバイト列をHEXダンプ文字列にします。
def _dump(bus: MemoryBus, address: int, length: int) -> str:
    return " ".join(f"{bus.peek(address + i):02X}" for i in range(length))


# @intent:responsibility [start_addr, end_addr) の範囲を先頭から命令単位でたどり、1行ずつ返します。
# @intent:post-condition 命令の途中でバスの終端に達した場合、そのアドレスは読み取り不能として1バイトずつ進みます。
def iter_disassembly(bus: MemoryBus, start_addr: int, end_addr: int) -> Iterator[DisassemblyRow]:
    address = start_addr
    end_addr = min(end_addr, ADDRESS_SPACE_SIZE)
    while address < end_addr:
        try:
            operation = decode_opcode(bus.peek(address), bus, address)
            hex_dump = _dump(bus, address, operation.length)
        except IndexError:
            yield (address, *UNREADABLE_ROW)
            address += 1
            continue
        yield address, hex_dump, operation.text
        address += operation.length


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、(アドレス, 16進ダンプ, ニーモニック) のリストを返します。
def disassemble(bus: MemoryBus, start_addr: int, length: int) -> List[DisassemblyRow]:
    """
    未定義のオペコードは "DB $xx" として、バス範囲外の読み込みは "??"/"ERR" として出力します。
    """
    return list(iter_disassembly(bus, start_addr, start_addr + length))
