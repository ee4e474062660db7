# lr35902_core/loader/loader.py
"""
プログラムイメージローダーモジュール。
生バイナリ（ROMイメージ）および Intel HEX 形式のロードをサポートします。
"""
import logging

from lr35902_core.transport.bus import MemoryBus

logger = logging.getLogger(__name__)

class BinaryLoader:
    """
    生のバイナリファイルを指定オフセットからバスに配置するローダー。
    """
    # @intent:pre-condition イメージ全体がバスの範囲内に収まる必要があります。収まらない場合は何も書き込まずIndexErrorになります。
    def load_binary(self, file_path: str, bus: MemoryBus, offset: int = 0) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        bus.load(offset, data)
        logger.info("Loaded %d bytes from %s at %04X", len(data), file_path, offset)
        return len(data)

class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、データをバスにロードするローダー。
    レコードタイプ 00/01/02/04 を解釈し、03/05 は無視します。
    """
    def load_intel_hex(self, file_path: str, bus: MemoryBus) -> int:
        base_address = 0x0000
        loaded = 0

        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.split(';', 1)[0].strip()
                if not line.startswith(':'):
                    continue

                record = self._parse_record(line, line_num)
                data_length, address_field, record_type = record[0], (record[1] << 8) | record[2], record[3]
                data = record[4:4 + data_length]

                if record_type == 0x00:
                    try:
                        bus.load(base_address + address_field, data)
                    except IndexError as e:
                        raise IndexError(f"Data record on line {line_num} does not fit on the bus: {e}") from e
                    loaded += data_length
                elif record_type == 0x01:
                    break
                elif record_type == 0x02:
                    base_address = int.from_bytes(data, "big") << 4
                elif record_type == 0x04:
                    base_address = int.from_bytes(data, "big") << 16
                elif record_type in (0x03, 0x05):
                    pass
                else:
                    raise ValueError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        logger.info("Loaded %d bytes from %s", loaded, file_path)
        return loaded

    # @intent:responsibility 1行分のレコードを検証し、チェックサムを含む生バイト列として返します。
    def _parse_record(self, line: str, line_num: int) -> bytes:
        if len(line) < 11:
            raise ValueError(f"Invalid Intel HEX record format on line {line_num}: Too short - {line}")
        try:
            record = bytes.fromhex(line[1:])
        except ValueError as e:
            raise ValueError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

        if len(record) != record[0] + 5:
            raise ValueError(f"Data length mismatch on line {line_num}")
        # 全バイト（チェックサム含む）の和の下位8ビットは0になる
        if sum(record) & 0xFF != 0:
            expected = (-sum(record[:-1])) & 0xFF
            raise ValueError(
                f"Checksum mismatch on line {line_num}: Calculated {expected:02X}, Expected {record[-1]:02X}"
            )
        return record
