from dataclasses import dataclass, field
from typing import List
import yaml
from pathlib import Path


def _default_extensions() -> List[str]:
    return ['.jpg', '.jpeg', '.png', '.bmp', '.gif', '.tiff', '.webp']


@dataclass
class ScanConfig:
    """Configuration for classifying and decoding image files"""
    sniff_content: bool = True  # libmagic; False falls back to extensions
    image_extensions: List[str] = field(default_factory=_default_extensions)
    max_image_pixels: int = 100_000_000  # 100MP decompression bomb limit


@dataclass
class SystemConfig:
    """System-wide configuration"""
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True
    show_progress: bool = True

    # Image scanning
    scan: ScanConfig = field(default_factory=ScanConfig)

    def save(self, path: str = "config.yaml"):
        """Save configuration to YAML file"""
        config_dict = {
            'log_level': self.log_level,
            'log_dir': self.log_dir,
            'log_to_file': self.log_to_file,
            'show_progress': self.show_progress,
            'scan': {
                'sniff_content': self.scan.sniff_content,
                'image_extensions': list(self.scan.image_extensions),
                'max_image_pixels': self.scan.max_image_pixels
            }
        }

        with open(path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @classmethod
    def load(cls, path: str = "config.yaml") -> 'SystemConfig':
        """Load configuration from YAML file"""
        if not Path(path).exists():
            return cls()  # Return default config

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        config = cls()

        # Load system settings
        config.log_level = config_dict.get('log_level', config.log_level)
        config.log_dir = config_dict.get('log_dir', config.log_dir)
        config.log_to_file = config_dict.get('log_to_file', config.log_to_file)
        config.show_progress = config_dict.get('show_progress', config.show_progress)

        # Load scan settings
        if 'scan' in config_dict:
            sc = config_dict['scan'] or {}
            config.scan = ScanConfig(
                sniff_content=sc.get('sniff_content', config.scan.sniff_content),
                image_extensions=[
                    ext.lower() for ext in
                    sc.get('image_extensions', config.scan.image_extensions)
                ],
                max_image_pixels=sc.get('max_image_pixels', config.scan.max_image_pixels)
            )

        return config
