import yaml
from typing import Dict, Any
from lr35902_core.transport.bus import ADDRESS_SPACE_SIZE
from .models import SystemConfig, ProgramImage, CpuInitialState

IMAGE_FORMATS = ("binary", "ihex")

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        memory_size = self._parse_int(data.get("memory_size", ADDRESS_SPACE_SIZE))

        # Parse Program Images
        images = []
        for image_data in data.get("images", []):
            if "path" not in image_data:
                raise ValueError(f"Image entry without path: {image_data}")
            fmt = image_data.get("format", "binary")
            if fmt not in IMAGE_FORMATS:
                raise ValueError(f"Unknown image format '{fmt}' for {image_data['path']}")

            images.append(ProgramImage(
                path=image_data["path"],
                format=fmt,
                offset=self._parse_int(image_data.get("offset", 0))
            ))

        # Parse Initial State
        initial_state_data = data.get("initial_state", {})
        registers = {
            name: self._parse_int(value)
            for name, value in initial_state_data.get("registers", {}).items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0)),
            sp=self._parse_int(initial_state_data.get("sp", 0)),
            registers=registers
        )

        return SystemConfig(
            memory_size=memory_size,
            images=images,
            initial_state=initial_state
        )

    def _parse_int(self, value: Any) -> int:
        # boolはintのサブクラスなので先に弾く
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid integer format: {value}") from None
        raise ValueError(f"Invalid integer format: {value}")
