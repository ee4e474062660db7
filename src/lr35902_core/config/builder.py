import logging
from typing import Tuple

from lr35902_core.transport.bus import MemoryBus
from lr35902_core.arch.lr35902.cpu import Lr35902Cpu
from lr35902_core.loader.loader import BinaryLoader, IntelHexLoader
from .models import SystemConfig, CpuInitialState

logger = logging.getLogger(__name__)

# @intent:constant 初期状態として設定可能な8ビットレジスタ。
REGISTER_NAMES = ("a", "b", "c", "d", "e", "h", "l", "f")
# @intent:constant 初期状態として設定可能な16ビットレジスタペア。
PAIR_NAMES = ("af", "bc", "de", "hl")

# @intent:responsibility システム構成（Config）に基づいて、BusとCPUを生成・接続し、イメージと初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Lr35902Cpu, MemoryBus]:
        bus = MemoryBus(config.memory_size)

        for image in config.images:
            if image.format == "binary":
                BinaryLoader().load_binary(image.path, bus, image.offset)
            elif image.format == "ihex":
                if image.offset:
                    logger.warning("Offset %04X ignored for Intel HEX image %s", image.offset, image.path)
                IntelHexLoader().load_intel_hex(image.path, bus)
            else:
                raise ValueError(f"Unsupported image format: {image.format}")

        cpu = Lr35902Cpu(bus)
        self.apply_initial_state(cpu, config.initial_state)

        return cpu, bus

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Lr35902Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        値はレジスタ幅でマスクされます。Fの下位4ビットは常に0になります。
        """
        cpu.reset()
        state = cpu.get_state()

        state.pc = config_state.pc & 0xFFFF
        state.sp = config_state.sp & 0xFFFF
        for reg_name, value in config_state.registers.items():
            name = reg_name.lower()
            if name in PAIR_NAMES:
                setattr(state, name, value & 0xFFFF)
            elif name == "f":
                state.af = (state.a << 8) | (value & 0xFF)
            elif name in REGISTER_NAMES:
                setattr(state, name, value & 0xFF)
            else:
                raise ValueError(f"Unknown register in initial state: {reg_name}")
