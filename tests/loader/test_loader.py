# tests/loader/test_loader.py
"""
lr35902_core.loader.loaderモジュールの単体テスト。
生バイナリとIntel HEXファイルのロード機能を検証します。
"""
import pytest

from lr35902_core.transport.bus import MemoryBus
from lr35902_core.loader.loader import BinaryLoader, IntelHexLoader

# @intent:test_suite プログラムイメージローダー機能の検証。

class TestBinaryLoader:
    def test_load_binary_at_offset(self, tmp_path):
        rom = tmp_path / "rom.gb"
        rom.write_bytes(bytes([0x00, 0xC3, 0x50, 0x01]))
        bus = MemoryBus()

        loaded = BinaryLoader().load_binary(str(rom), bus, 0x0100)

        assert loaded == 4
        assert [bus.peek(a) for a in range(0x0100, 0x0104)] == [0x00, 0xC3, 0x50, 0x01]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_oob バスに収まらないイメージは何も書き込まずにIndexErrorになることを検証します。
    def test_load_binary_too_large(self, tmp_path):
        rom = tmp_path / "big.gb"
        rom.write_bytes(bytes([0xFF] * 8))
        bus = MemoryBus(8)
        with pytest.raises(IndexError):
            BinaryLoader().load_binary(str(rom), bus, 1)
        assert all(bus.peek(a) == 0 for a in range(8))

class TestIntelHexLoader:
    """
    IntelHexLoaderの単体テスト。
    """

    @pytest.fixture
    def setup_loader(self, tmp_path):
        bus = MemoryBus()
        loader = IntelHexLoader()
        return loader, bus, tmp_path

    def test_load_simple_hex_data(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :020000001234B8
        :02000200ABCD84
        :00000001FF
        """
        hex_file = tmp_path / "simple.hex"
        hex_file.write_text(hex_content)

        assert loader.load_intel_hex(str(hex_file), bus) == 4

        assert bus.peek(0x0000) == 0x12
        assert bus.peek(0x0001) == 0x34
        assert bus.peek(0x0002) == 0xAB
        assert bus.peek(0x0003) == 0xCD

    def test_load_extended_segment_address(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :020000020100FB ; Segment 0x0100 -> base 0x1000
        :021000001234A8
        :00000001FF
        """
        hex_file = tmp_path / "esa.hex"
        hex_file.write_text(hex_content)

        loader.load_intel_hex(str(hex_file), bus)

        assert bus.peek(0x2000) == 0x12
        assert bus.peek(0x2001) == 0x34

    # @intent:test_case_oob 拡張リニアアドレスで64KiBを超える場合はIndexErrorになることを検証します。
    def test_load_extended_linear_address_beyond_bus(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :020000040001F9 ; Set ELA to 0x0001xxxx
        :021000001234A8
        :00000001FF
        """
        hex_file = tmp_path / "ela.hex"
        hex_file.write_text(hex_content)

        with pytest.raises(IndexError, match="line 3"):
            loader.load_intel_hex(str(hex_file), bus)

    def test_load_multiple_records_and_ignored_types(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :03000000AABBCCCC
        :0400000300003800C1
        :02000300DDEE30
        :00000001FF
        :010005009961
        """
        hex_file = tmp_path / "multiple.hex"
        hex_file.write_text(hex_content)

        loader.load_intel_hex(str(hex_file), bus)

        assert [bus.peek(a) for a in range(5)] == [0xAA, 0xBB, 0xCC, 0xDD, 0xEE]
        # EOFレコード以降は読み込まれない
        assert bus.peek(0x0005) == 0x00

    def test_load_invalid_checksum(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :020000001234B9 ; Checksum should be B8, but it's B9
        :00000001FF
        """
        hex_file = tmp_path / "invalid_checksum.hex"
        hex_file.write_text(hex_content)

        with pytest.raises(ValueError, match="Checksum mismatch on line 2: Calculated B8, Expected B9"):
            loader.load_intel_hex(str(hex_file), bus)

    def test_load_unknown_record_type(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_content = """
        :020000061234B2 ; Record type 0x06 is unknown
        :00000001FF
        """
        hex_file = tmp_path / "unknown_record.hex"
        hex_file.write_text(hex_content)

        with pytest.raises(ValueError, match="Unknown Intel HEX record type 06 on line 2"):
            loader.load_intel_hex(str(hex_file), bus)

    @pytest.mark.parametrize("line, message", [
        (":0000", "Too short"),
        (":02000000ZZ34B8", "Error parsing Intel HEX line 1"),
        (":0300000012B9", "Data length mismatch on line 1"),
    ])
    def test_load_malformed_record(self, setup_loader, line, message):
        loader, bus, tmp_path = setup_loader
        hex_file = tmp_path / "malformed.hex"
        hex_file.write_text(line + "\n")

        with pytest.raises(ValueError, match=message):
            loader.load_intel_hex(str(hex_file), bus)

    def test_load_empty_hex_file(self, setup_loader):
        loader, bus, tmp_path = setup_loader
        hex_file = tmp_path / "empty.hex"
        hex_file.write_text("")

        assert loader.load_intel_hex(str(hex_file), bus) == 0
        assert bus.peek(0x0000) == 0x00
