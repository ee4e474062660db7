# tests/arch/lr35902/test_disassembler.py
"""
lr35902_core.arch.lr35902.disassemblerおよびdecode_opcodeの単体テスト。
"""
import pytest

from lr35902_core.transport.bus import MemoryBus
from lr35902_core.arch.lr35902.cpu import Lr35902Cpu
from lr35902_core.arch.lr35902.disassembler import disassemble, iter_disassembly
from lr35902_core.arch.lr35902.instructions import decode_opcode

PROGRAM = bytes([
    0x00,              # 0x00 NOP
    0xC3, 0x34, 0x12,  # 0x01 JP $3412
    0x3E, 0x05,        # 0x04 LD A,$05
    0x18, 0xFE,        # 0x06 JR $0006
    0xCB, 0x7C,        # 0x08 BIT 7,H
    0xD3,              # 0x0A (undefined)
    0xE0, 0x40,        # 0x0B LDH ($FF40),A
    0xF8, 0xFE,        # 0x0D LD HL,SP-$02
    0xE8, 0x05,        # 0x0F ADD SP,+$05
    0x08, 0xC0, 0x00,  # 0x11 LD ($C000),SP
    0xFA, 0x00, 0x10,  # 0x14 LD A,($0010)
    0x10, 0x00,        # 0x17 STOP $00
    0xC7,              # 0x19 RST 00H
    0x20, 0x05,        # 0x1A JR NZ,$0021
])

class TestDisassembler:
    @pytest.fixture
    def bus(self):
        bus = MemoryBus()
        bus.load(0x0000, PROGRAM)
        return bus

    def test_disassemble_program(self, bus):
        result = disassemble(bus, 0x0000, len(PROGRAM))
        assert result == [
            (0x00, "00", "NOP"),
            (0x01, "C3 34 12", "JP $3412"),
            (0x04, "3E 05", "LD A,$05"),
            (0x06, "18 FE", "JR $0006"),
            (0x08, "CB 7C", "BIT 7,H"),
            (0x0A, "D3", "DB $D3"),
            (0x0B, "E0 40", "LDH ($FF40),A"),
            (0x0D, "F8 FE", "LD HL,SP-$02"),
            (0x0F, "E8 05", "ADD SP,+$05"),
            (0x11, "08 C0 00", "LD ($C000),SP"),
            (0x14, "FA 00 10", "LD A,($0010)"),
            (0x17, "10 00", "STOP $00"),
            (0x19, "C7", "RST 00H"),
            (0x1A, "20 05", "JR NZ,$0021"),
        ]

    # @intent:test_case_no_log 逆アセンブルはバスアクセスログを汚さないことを検証します。
    def test_disassemble_does_not_log(self, bus):
        bus.get_and_clear_activity_log()
        disassemble(bus, 0x0000, len(PROGRAM))
        assert bus.get_and_clear_activity_log() == []

    def test_cpu_delegates_to_disassembler(self, bus):
        cpu = Lr35902Cpu(bus)
        assert cpu.disassemble(0x0001, 3) == [(0x01, "C3 34 12", "JP $3412")]

    # @intent:test_case_oob バスの終端を越える読み込みは "??"/"ERR" として出力されることを検証します。
    def test_disassemble_past_end_of_bus(self):
        bus = MemoryBus(4)
        bus.load(0, bytes([0x00, 0x00, 0x00, 0xC3]))
        result = disassemble(bus, 0, 6)
        assert result[:3] == [(0, "00", "NOP"), (1, "00", "NOP"), (2, "00", "NOP")]
        assert result[3:] == [(3, "??", "ERR"), (4, "??", "ERR"), (5, "??", "ERR")]

    # @intent:test_case_range 64KiBの終端を越える範囲は出力しないことを検証します。
    def test_disassemble_stops_at_end_of_address_space(self):
        bus = MemoryBus()
        assert disassemble(bus, 0xFFFE, 8) == [(0xFFFE, "00", "NOP"), (0xFFFF, "00", "NOP")]

    def test_iter_disassembly_is_lazy(self, bus):
        rows = iter_disassembly(bus, 0x0000, len(PROGRAM))
        assert next(rows) == (0x00, "00", "NOP")
        assert next(rows) == (0x01, "C3 34 12", "JP $3412")

class TestDecodeOpcode:
    def test_decode_operation_fields(self):
        bus = MemoryBus()
        bus.load(0x0100, bytes([0x01, 0xBE, 0xEF]))
        op = decode_opcode(0x01, bus, 0x0100)
        assert op.opcode_hex == "01"
        assert op.mnemonic == "LD"
        assert op.operands == ["BC", "$BEEF"]
        assert op.operand_bytes == [0xBE, 0xEF]
        assert op.length == 3

    def test_decode_cb(self):
        bus = MemoryBus()
        bus.load(0x0200, bytes([0xCB, 0x36]))
        op = decode_opcode(0xCB, bus, 0x0200)
        assert op.opcode_hex == "CB36"
        assert op.mnemonic == "SWAP"
        assert op.operands == ["(HL)"]
        assert op.length == 2

    def test_decode_undefined(self):
        op = decode_opcode(0xFD, MemoryBus(), 0x0000)
        assert op.mnemonic == "DB"
        assert op.operands == ["$FD"]
        assert op.length == 1

    @pytest.mark.parametrize("opcode, text", [
        (0x22, "LD (HL+),A"),
        (0x3A, "LD A,(HL-)"),
        (0xF2, "LD A,(C)"),
        (0x9E, "SBC A,(HL)"),
        (0xF1, "POP AF"),
        (0x76, "HALT"),
        (0xD9, "RETI"),
    ])
    def test_decode_single_byte(self, opcode, text):
        op = decode_opcode(opcode, MemoryBus(), 0x0000)
        rendered = op.mnemonic + (" " + ",".join(op.operands) if op.operands else "")
        assert rendered == text
        assert op.length == 1
