'''
Configuration management for hydrofreq.

Settings are organized in dataclass sections held by a module-level
ConfigManager. Values are layered:

1. Defaults built into the package
2. A JSON file named by the HYDROFREQ_CONFIG_FILE environment variable
3. Environment variables of the form HYDROFREQ_<SECTION>_<OPTION>
4. Runtime modifications through set_config

The numerical section drives optimizer tolerances and finite-difference steps,
the bootstrap section the defaults and validation limits of bootstrap
analyses, and the logging section the handlers attached to the "hydrofreq"
logger.
'''

import os
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, get_type_hints

from .exceptions import ConfigurationError
from .types import LogLevel

# Set up module-level logger
logger = logging.getLogger("hydrofreq.core.config")

# Constants for configuration paths and environment variables
CONFIG_ENV_PREFIX = "HYDROFREQ_"
CONFIG_FILE_ENV = "HYDROFREQ_CONFIG_FILE"


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    CORE = "core"
    NUMERICAL = "numerical"
    ESTIMATION = "estimation"
    BOOTSTRAP = "bootstrap"
    LOGGING = "logging"


@dataclass
class CoreConfig:
    """
    Core configuration settings.

    Attributes:
        version: The version of the configuration format
        default_seed: Seed used by stochastic operations called without one
        near_zero: Magnitude below which shape and skew parameters take
            their zero-limit formulas
    """
    version: str = "1.0.0"
    default_seed: int = 12345
    near_zero: float = 1e-4


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings.

    Attributes:
        optimization_tol: Convergence tolerance for the likelihood optimizer
        max_iterations: Maximum optimizer iterations
        finite_difference_step: Fixed step for numerical derivatives
            (None for a step scaled to each parameter)
        integration_tol: Tolerance for numerical integration of moments
        singular_tolerance: Determinant magnitude at or below which a
            quantile Jacobian is reported as singular
        log_floor: Value substituted for non-positive sample values before
            a log transform
    """
    optimization_tol: float = 1e-8
    max_iterations: int = 10000
    finite_difference_step: Optional[float] = None
    integration_tol: float = 1e-8
    singular_tolerance: float = 1e-10
    log_floor: float = 0.01


@dataclass
class EstimationConfig:
    """
    Parameter estimation settings.

    Attributes:
        default_method: Estimation method used when none is given
        raise_on_failure: Whether a non-converged likelihood search raises
            ConvergenceError instead of returning a failed result
    """
    default_method: str = "MLE"
    raise_on_failure: bool = False


@dataclass
class BootstrapConfig:
    """
    Bootstrap settings.

    Attributes:
        replications: Default number of bootstrap replications
        retries: Attempts per replicate before it is recorded as failed
        min_sample_size: Smallest synthetic sample size accepted
        min_replications: Smallest replication count accepted
        alpha: Default significance level for confidence intervals
    """
    replications: int = 10000
    retries: int = 20
    min_sample_size: int = 10
    min_replications: int = 100
    alpha: float = 0.1


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Default logging level
        log_file: Path to log file (None for no file logging)
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to log to console
        file_logging: Whether to log to file
    """
    log_level: LogLevel = "WARNING"
    log_file: Optional[Path] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True
    file_logging: bool = False


@dataclass
class HydroFreqConfig:
    """
    Complete configuration combining all sections.

    Attributes:
        core: Core configuration settings
        numerical: Numerical configuration settings
        estimation: Estimation configuration settings
        bootstrap: Bootstrap configuration settings
        logging: Logging configuration settings
    """
    core: CoreConfig = field(default_factory=CoreConfig)
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    estimation: EstimationConfig = field(default_factory=EstimationConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Replacement values used when a constraint check fails
_CONSTRAINT_DEFAULTS = {
    "optimization_tol": 1e-8,
    "max_iterations": 10000,
    "integration_tol": 1e-8,
    "singular_tolerance": 1e-10,
    "log_floor": 0.01,
    "replications": 10000,
    "retries": 20,
    "min_sample_size": 10,
    "min_replications": 100,
    "alpha": 0.1,
    "near_zero": 1e-4,
}


class ConfigManager:
    """
    Configuration manager for hydrofreq.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the JSON configuration file, if any
    """

    def __init__(self):
        """Initialize the configuration manager with default settings."""
        self._config = HydroFreqConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        This method:
        1. Loads the JSON configuration file if one is named
        2. Applies environment variable overrides
        3. Sets up logging based on configuration
        4. Validates the configuration
        """
        if self._initialized:
            return

        self._load_config_file()
        self._apply_env_overrides()
        self._setup_logging()
        self._validate_config()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _load_config_file(self) -> None:
        """Load configuration from the file named by HYDROFREQ_CONFIG_FILE."""
        env_file = os.environ.get(CONFIG_FILE_ENV)
        if not env_file:
            logger.debug("No configuration file specified")
            return

        self._config_file = Path(env_file)
        if not self._config_file.exists():
            logger.warning(f"Configuration file not found: {self._config_file}")
            return

        try:
            with open(self._config_file, 'r') as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load configuration file: {e}")
            return

        self._update_from_dict(user_config)
        logger.debug(f"Loaded configuration from {self._config_file}")

    def _apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to the configuration.

        Variables are named HYDROFREQ_<SECTION>_<OPTION>; the value is
        converted to the type of the option's current value.
        """
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == CONFIG_FILE_ENV:
                continue

            # Remove prefix and split into section and option
            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split('_', 1)

            if len(parts) != 2:
                continue

            section, option = parts

            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            current_value = getattr(section_obj, option)
            try:
                typed_value = self._convert(value, current_value)
            except ValueError as e:
                logger.warning(f"Failed to apply environment override {env_var}: {e}")
                continue

            setattr(section_obj, option, typed_value)
            logger.debug(f"Applied environment override: {env_var}={value}")

    @staticmethod
    def _convert(value: str, current_value: Any) -> Any:
        """Convert a string to the type of an option's current value."""
        value_type = type(current_value)
        if value_type is bool:
            return value.lower() in ('true', 'yes', '1', 'y')
        if value_type is int:
            return int(value)
        if value_type is float:
            return float(value)
        if current_value is None:
            # Optional numeric options such as finite_difference_step
            if value.lower() in ('none', ''):
                return None
            try:
                return float(value)
            except ValueError:
                return Path(value)
        if isinstance(current_value, Path):
            return Path(value)
        return value

    def _setup_logging(self) -> None:
        """Configure the "hydrofreq" logger from the logging section."""
        root_logger = logging.getLogger("hydrofreq")

        # Clear existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        log_level = getattr(logging, self._config.logging.log_level, logging.WARNING)
        root_logger.setLevel(log_level)

        formatter = logging.Formatter(
            fmt=self._config.logging.log_format,
            datefmt=self._config.logging.log_date_format
        )

        if self._config.logging.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if self._config.logging.file_logging and self._config.logging.log_file:
            try:
                log_file = Path(self._config.logging.log_file)
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
            except OSError as e:
                logger.warning(f"Failed to set up file logging: {e}")

    def _validate_config(self) -> None:
        """Validate every section, replacing out-of-range values with defaults."""
        for section in ConfigSection:
            self._validate_section(getattr(self._config, section.value), section.value)

    def _validate_section(self, section: Any, section_name: str) -> None:
        """
        Validate a configuration section.

        Args:
            section: The configuration section to validate
            section_name: The name of the section
        """
        hints = get_type_hints(type(section))

        for attr_name in hints:
            value = getattr(section, attr_name)
            if value is None:
                continue

            if attr_name == "log_level":
                if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                    logger.warning(f"Invalid log level: {value}, using WARNING")
                    setattr(section, attr_name, "WARNING")
                continue

            if attr_name == "log_file" and isinstance(value, str):
                setattr(section, attr_name, Path(value))
                continue

            self._validate_constraint(section, attr_name, value, section_name)

    def _validate_constraint(self, section: Any, attr_name: str, value: Any, section_name: str) -> None:
        """
        Validate a specific constraint on a configuration value.

        Args:
            section: The configuration section
            attr_name: The attribute name
            value: The attribute value
            section_name: The name of the section
        """
        invalid = False
        if attr_name in ("max_iterations", "replications", "retries",
                         "min_sample_size", "min_replications"):
            invalid = not isinstance(value, int) or value <= 0
        elif attr_name in ("optimization_tol", "integration_tol", "near_zero", "alpha"):
            invalid = not 0 < value < 1
        elif attr_name in ("singular_tolerance", "log_floor"):
            invalid = value <= 0
        elif attr_name == "finite_difference_step":
            if not 0 < value < 1:
                logger.warning(f"Invalid {section_name}.finite_difference_step: {value}, using scaled step")
                setattr(section, attr_name, None)
            return
        elif attr_name == "default_method":
            from .types import ParameterEstimationMethod
            try:
                ParameterEstimationMethod.from_value(value)
            except ValueError:
                logger.warning(f"Invalid default_method: {value}, using MLE")
                setattr(section, attr_name, "MLE")
            return

        if invalid:
            default = _CONSTRAINT_DEFAULTS[attr_name]
            logger.warning(f"Invalid {section_name}.{attr_name}: {value}, using {default}")
            setattr(section, attr_name, default)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update the configuration from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values
        """
        for section_name, section_dict in config_dict.items():
            if not hasattr(self._config, section_name):
                logger.warning(f"Unknown configuration section: {section_name}")
                continue

            section = getattr(self._config, section_name)

            for option_name, option_value in section_dict.items():
                if not hasattr(section, option_name):
                    logger.warning(f"Unknown configuration option: {section_name}.{option_name}")
                    continue

                setattr(section, option_name, option_value)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        result = {}
        for section in ConfigSection:
            section_obj = getattr(self._config, section.value)
            section_dict = {}
            for field_name in section_obj.__dataclass_fields__:
                value = getattr(section_obj, field_name)
                if isinstance(value, Path):
                    value = str(value)
                section_dict[field_name] = value
            result[section.value] = section_dict
        return result

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Default value if the option is not found

        Returns:
            The configuration value, or the default if not found
        """
        section_obj = getattr(self._config, section, None)
        if section_obj is None or not hasattr(section_obj, option):
            return default
        return getattr(section_obj, option)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is not found, or the
                value cannot be converted to the option's type
        """
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                section=section,
                option=option,
                value=value
            )

        section_obj = getattr(self._config, section)

        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                section=section,
                option=option,
                value=value
            )

        current_value = getattr(section_obj, option)
        try:
            if isinstance(value, str) and not isinstance(current_value, str):
                typed_value = self._convert(value, current_value)
            elif current_value is not None and value is not None and type(current_value) is not type(value):
                typed_value = type(current_value)(value)
            else:
                typed_value = value
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                section=section,
                option=option,
                value=value,
                details=str(e)
            ) from e

        setattr(section_obj, option, typed_value)
        self._validate_section(section_obj, section)

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()

        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        if section is None:
            self._config = HydroFreqConfig()
            self._setup_logging()
            logger.debug("Reset all configuration to defaults")
            return

        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                section=section
            )

        default_config = HydroFreqConfig()

        if option is None:
            setattr(self._config, section, getattr(default_config, section))
            logger.debug(f"Reset configuration section: {section}")
            return

        section_obj = getattr(self._config, section)
        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                section=section,
                option=option
            )

        setattr(section_obj, option, getattr(getattr(default_config, section), option))
        logger.debug(f"Reset configuration option: {section}.{option}")

    def get_section(self, section: str) -> Any:
        """
        Get a configuration section object.

        Raises:
            ConfigurationError: If the section is not found
        """
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                section=section
            )
        return getattr(self._config, section)


# Create a singleton instance of the configuration manager
_config_manager = ConfigManager()


def initialize_config() -> None:
    """
    Initialize the configuration system.

    This function loads the configuration file named by HYDROFREQ_CONFIG_FILE
    and applies environment variable overrides.
    """
    _config_manager.initialize()


def get_config_manager() -> ConfigManager:
    """
    Get the configuration manager instance.

    Returns:
        The configuration manager instance
    """
    if not _config_manager._initialized:
        initialize_config()

    return _config_manager


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    return get_config_manager().get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    get_config_manager().set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """
    Reset configuration to default values.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    get_config_manager().reset(section, option)


def get_core_config() -> CoreConfig:
    """Get the core configuration."""
    return get_config_manager().get_section("core")


def get_numerical_config() -> NumericalConfig:
    """Get the numerical configuration."""
    return get_config_manager().get_section("numerical")


def get_estimation_config() -> EstimationConfig:
    """Get the estimation configuration."""
    return get_config_manager().get_section("estimation")


def get_bootstrap_config() -> BootstrapConfig:
    """Get the bootstrap configuration."""
    return get_config_manager().get_section("bootstrap")


def get_logging_config() -> LoggingConfig:
    """Get the logging configuration."""
    return get_config_manager().get_section("logging")


def to_dict() -> Dict[str, Any]:
    """
    Convert the configuration to a dictionary.

    Returns:
        Dictionary representation of the configuration
    """
    return get_config_manager().to_dict()


# Initialize the configuration when the module is imported
initialize_config()
