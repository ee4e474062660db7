# lr35902_core/transport/bus.py
"""
Transport Layer (メモリバス)

このモジュールは、LR35902のアドレス空間全体を一枚のフラットなバイト配列として保持し、
バイト単位およびワード単位の読み書きを提供する責務を負います。
バンク切り替えやメモリマップドI/Oの副作用は扱いません（上位のメモリコントローラ層の責務）。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

# @intent:constant LR35902がアクセス可能なアドレス数。
ADDRESS_SPACE_SIZE = 65536

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType

# @intent:responsibility フラットなアドレス空間への読み書きを提供し、全アクセスを記録します。
# @intent:rationale バスの全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class MemoryBus:
    """
    ゼロ初期化されたバイト配列でアドレス空間全体を表現するメモリバス。

    ワードアクセス（read_word/write_word）はワード単位のインデックスを取り、
    バイトオフセット `addr*2`（上位バイト）と `addr*2+1`（下位バイト）に
    ビッグエンディアンで配置されます。
    """
    # @intent:responsibility 指定された容量のメモリ領域をゼロで初期化します。
    # @intent:pre-condition capacityは正の整数である必要があります。
    def __init__(self, capacity: int = ADDRESS_SPACE_SIZE):
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("Bus capacity must be a positive integer.")
        self._memory = bytearray(capacity)
        self._capacity = capacity
        self._bus_activity_log: List[BusAccess] = []

    # @intent:responsibility バスの容量（バイト数）を返します。
    def get_size(self) -> int:
        return self._capacity

    # @intent:responsibility アドレスが配列の範囲内であることを保証します。
    # @intent:rationale Pythonの負のインデックスは末尾からの参照として成功してしまうため、明示的に検査します。
    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._capacity:
            raise IndexError(f"Address {address:#06x} out of bounds for bus of size {self._capacity}.")

    # @intent:responsibility 複数バイトにまたがる書き込みの前に、全アドレスを一括で検査します。
    # @intent:post-condition 1つでも範囲外ならIndexErrorとなり、メモリもログも変更されません。
    def check_addresses(self, *addresses: int) -> None:
        for address in addresses:
            self._check_address(address)

    def _check_word_address(self, address: int) -> None:
        if not 0 <= address * 2 + 1 < self._capacity:
            raise IndexError(
                f"Word address {address:#06x} out of bounds for bus of size {self._capacity}."
            )

    # @intent:responsibility バスアクセスをログに記録します。
    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        """
        現在のバスアクティビティログを返し、内部ログをクリアします。
        """
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    # @intent:pre-condition アドレスはバスの有効範囲内である必要があります。
    def read_byte(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します。
        アクセスはログに記録されます。
        """
        self._check_address(address)
        data = self._memory[address]
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition アドレスはバスの有効範囲内であり、データは8bit値である必要があります。
    def write_byte(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility ワードアドレスから16bitのデータをビッグエンディアンで読み出します。
    def read_word(self, address: int) -> int:
        """
        ワード単位のアドレスから16bitのデータを読み出します。
        バイトオフセット `address*2` が上位バイト、`address*2+1` が下位バイトです。
        """
        self._check_word_address(address)
        high = self._memory[address * 2]
        low = self._memory[address * 2 + 1]
        self._log_access(address * 2, high, BusAccessType.READ)
        self._log_access(address * 2 + 1, low, BusAccessType.READ)
        return (high << 8) | low

    # @intent:responsibility ワードアドレスに16bitのデータをビッグエンディアンで書き込みます。
    def write_word(self, address: int, data: int) -> None:
        """
        ワード単位のアドレスに16bitのデータを書き込みます。
        上位バイトを `address*2` に、下位バイトを `address*2+1` に格納します。
        """
        self._check_word_address(address)
        if not 0 <= data <= 0xFFFF:
            raise ValueError(f"Data {data} is not a 16-bit value.")
        high = (data >> 8) & 0xFF
        low = data & 0xFF
        self._memory[address * 2] = high
        self._memory[address * 2 + 1] = low
        self._log_access(address * 2, high, BusAccessType.WRITE)
        self._log_access(address * 2 + 1, low, BusAccessType.WRITE)

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します（ログ記録なし）。
        デコーダや逆アセンブラなどのインスペクタ用。
        """
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility プログラムイメージを一括で書き込むためのバックドアメソッドです。
    # @intent:pre-condition イメージ全体がバスの範囲内に収まる必要があります。
    def load(self, offset: int, data: bytes) -> None:
        """
        プログラムイメージを指定オフセットから書き込みます。通常のバスアクセスではないためログに記録しません。
        範囲外にはみ出す場合は一切書き込まずにIndexErrorを発生させます。
        """
        if not data:
            return
        self._check_address(offset)
        self._check_address(offset + len(data) - 1)
        self._memory[offset:offset + len(data)] = data
