import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from .models import DriverConfig
from .security.models import CapabilitySet, ScanConfig


class ConfigManager:
    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self.config: Optional[DriverConfig] = None
        self.load_config()
    
    def load_config(self) -> DriverConfig:
        """Load configuration from file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        
        with open(self.config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
        
        # Merge with environment variables
        config_data = self._merge_env_vars(config_data)
        
        driver_config = config_data.get('driver', {})
        self.config = DriverConfig(**driver_config)
        
        # Store additional sections (oscap, capabilities, scan)
        for key, value in config_data.items():
            if key != 'driver':
                setattr(self.config, key, value)
        
        return self.config
    
    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration"""
        env_prefix = "SCAPD_"
        
        for key, value in os.environ.items():
            if key.startswith(env_prefix):
                config_key = key[len(env_prefix):].lower()
                
                # Handle nested keys (e.g., SCAPD_OSCAP_PATH -> oscap.path)
                if '_' in config_key:
                    parts = config_key.split('_')
                    section = parts[0]
                    nested_key = '_'.join(parts[1:])
                    
                    if not isinstance(config_data.get(section), dict):
                        config_data[section] = {}
                    
                    config_data[section][nested_key] = value
                else:
                    config_data[config_key] = value
        
        return config_data
    
    def get_config(self) -> DriverConfig:
        """Get current configuration"""
        if self.config is None:
            self.load_config()
        return self.config
    
    def get_section(self, section: str) -> Dict[str, Any]:
        """Get a specific configuration section"""
        if self.config is None:
            self.load_config()
        return getattr(self.config, section, None) or {}
    
    def get_capabilities(self) -> CapabilitySet:
        """Build the CapabilitySet declared for the installed oscap"""
        section = dict(self.get_section('capabilities'))
        # YAML reads an unquoted 1.3 as a float
        if 'version' in section:
            section['version'] = str(section['version'])
        return CapabilitySet(**section)
    
    def get_scan_config(self) -> ScanConfig:
        """Orchestrator tuning from the scan section, env strings coerced"""
        return ScanConfig(**self.get_section('scan'))
    
    def create_directories(self):
        """Create necessary directories based on configuration"""
        if self.config is None:
            return
        
        Path(self.config.logs_dir).mkdir(parents=True, exist_ok=True)
    
    def setup_logging(self):
        """Setup logging configuration"""
        config = self.get_config()
        log_level = getattr(logging, config.log_level.upper())
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        
        self.create_directories()
        
        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=[
                logging.FileHandler(Path(config.logs_dir) / 'scapdriver.log'),
                logging.StreamHandler()
            ]
        )
