# lr35902_core/transport/memory_map.py
"""
LR35902のアドレス空間レイアウト。

フラットなメモリバスの上に重ねられる論理領域の境界（バイトオフセット）を定義します。
領域ごとの意味論（バンク切り替え、I/Oの副作用）はここでは扱わず、
メモリコントローラやテストハーネスが参照する境界値のみを提供します。
"""
from enum import Enum

from lr35902_core.transport.bus import ADDRESS_SPACE_SIZE

# @intent:constant 各領域の先頭アドレス。
CARTRIDGE_ROM_0 = 0
CARTRIDGE_ROM_1 = 16_384
GRAPHICS_RAM = 32_768
CARTRIDGE_EXTERNAL_RAM = 40_960
WORKING_RAM = 49_152
WORKING_RAM_SHADOW = 57_344
GRAPHICS_SPRITE_INFO = 65_024
MEMORY_MAPPED_IO = 65_280
ZERO_PAGE_RAM = 65_408


# @intent:responsibility 論理メモリ領域を列挙します。値は領域の先頭アドレスです。
class MemoryRegion(Enum):
    CARTRIDGE_ROM_0 = CARTRIDGE_ROM_0
    CARTRIDGE_ROM_1 = CARTRIDGE_ROM_1
    GRAPHICS_RAM = GRAPHICS_RAM
    CARTRIDGE_EXTERNAL_RAM = CARTRIDGE_EXTERNAL_RAM
    WORKING_RAM = WORKING_RAM
    WORKING_RAM_SHADOW = WORKING_RAM_SHADOW
    GRAPHICS_SPRITE_INFO = GRAPHICS_SPRITE_INFO
    MEMORY_MAPPED_IO = MEMORY_MAPPED_IO
    ZERO_PAGE_RAM = ZERO_PAGE_RAM

    @property
    def start(self) -> int:
        return self.value

    # @intent:responsibility 領域の最終アドレス（次の領域の先頭の1つ前）を返します。
    @property
    def end(self) -> int:
        regions = list(MemoryRegion)
        index = regions.index(self)
        if index + 1 < len(regions):
            return regions[index + 1].start - 1
        return ADDRESS_SPACE_SIZE - 1


# @intent:responsibility 指定されたアドレスを含む論理領域を返します。
# @intent:pre-condition アドレスは0x0000-0xFFFFの範囲である必要があります。
def region_for(address: int) -> MemoryRegion:
    """
    アドレスが属するMemoryRegionを返します。範囲外の場合はIndexErrorを発生させます。
    """
    if not 0 <= address < ADDRESS_SPACE_SIZE:
        raise IndexError(f"Address {address:#06x} is outside the LR35902 address space.")
    for region in reversed(list(MemoryRegion)):
        if address >= region.start:
            return region
    # CARTRIDGE_ROM_0 starts at 0, so the loop always returns.
    raise IndexError(f"Address {address:#06x} not mapped to any region.")
