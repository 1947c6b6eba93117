"""
Minter configuration loading and validation.
"""

import os
from typing import Any

import yaml
from dotenv import load_dotenv
from solders.pubkey import Pubkey

REQUIRED_FIELDS = [
    "name",
    "rpc_endpoint",
]

# At least one path of each group must be present
REQUIRED_ONE_OF = [
    ("payer.private_key", "payer.keypair_path"),
    ("program.program_id", "program.keypair_path"),
]

CONFIG_VALIDATION_RULES = [
    ("submit.timeout", (int, float), 0.1, 3600, "submit.timeout must be between 0.1 and 3600 seconds"),
    ("submit.poll_interval", (int, float), 0.05, 60, "submit.poll_interval must be between 0.05 and 60 seconds"),
    ("funding.fee_multiplier", int, 1, 10_000, "funding.fee_multiplier must be between 1 and 10000"),
]

BOOLEAN_FIELDS = [
    "submit.skip_preflight",
    "funding.airdrop",
    "verify_mint",
]

PUBKEY_FIELDS = [
    "program.program_id",
    "minter.secondary_mint",
    "minter.update_authority",
]

# Valid values for enum-like fields
VALID_VALUES = {
    "submit.commitment": ["processed", "confirmed", "finalized"],
    "log_level": ["DEBUG", "INFO", "WARNING", "ERROR"],
}

DEFAULTS: dict[str, Any] = {
    "submit": {
        "skip_preflight": True,
        "timeout": 60,
        "poll_interval": 1.0,
        "commitment": "confirmed",
    },
    "funding": {
        "airdrop": True,
        "fee_multiplier": 100,
    },
    "verify_mint": False,
    "log_level": "INFO",
}


def load_minter_config(path: str) -> dict:
    """Load and validate a minter configuration from a YAML file."""
    with open(path) as f:
        config = yaml.safe_load(f) or {}

    env_file = config.get("env_file")
    if env_file:
        env_path = os.path.join(os.path.dirname(path), env_file)
        if os.path.exists(env_path):
            load_dotenv(env_path, override=True)
        else:
            load_dotenv(env_file, override=True)

    resolve_env_vars(config)
    apply_defaults(config, DEFAULTS)
    validate_config(config)
    return config


def resolve_env_vars(config: dict) -> None:
    """Recursively resolve environment variables in the configuration."""
    def resolve_env(value):
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            env_value = os.getenv(env_var)
            if env_value is None:
                raise ValueError(f"Environment variable '{env_var}' not found")
            return env_value
        return value

    def resolve_all(d):
        for k, v in d.items():
            if isinstance(v, dict):
                resolve_all(v)
            else:
                d[k] = resolve_env(v)

    resolve_all(config)


def apply_defaults(config: dict, defaults: dict) -> None:
    """Fill in missing keys from defaults without overwriting set values."""
    for key, value in defaults.items():
        if isinstance(value, dict):
            section = config.setdefault(key, {})
            if not isinstance(section, dict):
                raise ValueError(f"Config section '{key}' must be a mapping")
            apply_defaults(section, value)
        else:
            config.setdefault(key, value)


def get_nested_value(config: dict, path: str) -> Any:
    """Get a nested value from the configuration using dot notation."""
    keys = path.split(".")
    value = config
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            raise ValueError(f"Missing required config key: {path}")
        value = value[key]
    return value


def has_value(config: dict, path: str) -> bool:
    try:
        return get_nested_value(config, path) not in (None, "")
    except ValueError:
        return False


def validate_config(config: dict) -> None:
    """Validate the configuration against defined rules."""
    # Validate required fields
    for field in REQUIRED_FIELDS:
        get_nested_value(config, field)

    for group in REQUIRED_ONE_OF:
        if not any(has_value(config, path) for path in group):
            raise ValueError(f"One of {list(group)} is required")

    rpc_endpoint = config["rpc_endpoint"]
    if not isinstance(rpc_endpoint, str) or not rpc_endpoint.startswith(("http://", "https://")):
        raise ValueError("Invalid RPC endpoint. Must start with http:// or https://")

    # Validate config rules
    for path, expected_type, min_val, max_val, error_msg in CONFIG_VALIDATION_RULES:
        if not has_value(config, path):
            continue
        value = get_nested_value(config, path)

        if isinstance(value, bool) or not isinstance(value, expected_type):
            raise ValueError(f"Type error: {error_msg}")

        if not (min_val <= value <= max_val):
            raise ValueError(f"Range error: {error_msg}")

    for path in BOOLEAN_FIELDS:
        if has_value(config, path) and not isinstance(get_nested_value(config, path), bool):
            raise ValueError(f"{path} must be a boolean")

    for path in PUBKEY_FIELDS:
        if has_value(config, path):
            try:
                Pubkey.from_string(str(get_nested_value(config, path)))
            except ValueError as e:
                raise ValueError(f"{path} is not a valid address: {e!s}") from e

    # Validate enum-like fields
    for path, valid_values in VALID_VALUES.items():
        if has_value(config, path):
            value = get_nested_value(config, path)
            if value not in valid_values:
                raise ValueError(f"{path} must be one of {valid_values}")

    if has_value(config, "minter.authority_seed"):
        seed = str(get_nested_value(config, "minter.authority_seed"))
        if len(seed.encode()) > 32:
            raise ValueError("minter.authority_seed must be at most 32 bytes")


def print_config_summary(config: dict) -> None:
    """Print a summary of the loaded configuration."""
    print(f"Minter name: {config.get('name', 'unnamed')}")
    print(f"RPC endpoint: {config.get('rpc_endpoint')}")

    program = config.get("program", {})
    print(f"Program: {program.get('program_id') or program.get('keypair_path')}")

    submit = config.get("submit", {})
    print("Submit settings:")
    print(f"  - Skip preflight: {'yes' if submit.get('skip_preflight') else 'no'}")
    print(f"  - Commitment: {submit.get('commitment')}")
    print(f"  - Timeout: {submit.get('timeout')}s (poll every {submit.get('poll_interval')}s)")

    funding = config.get("funding", {})
    print(f"Airdrop: {'enabled' if funding.get('airdrop') else 'disabled'}")

    print("Configuration loaded successfully!")
