"""Configuration command implementations."""
from ...core import config


def config_set_command(args) -> None:
    """Set a global configuration value.

    Args:
        args: Command line arguments containing key and value
    """
    value = config.set_config_value(args.key, args.value)
    print(f"{args.key} = {value}")

def config_get_command(args) -> None:
    """Print a single global configuration value."""
    global_config = config.load_global_config()
    if args.key not in global_config:
        raise ValueError(f"Config key '{args.key}' is not set")
    print(global_config[args.key])

def config_list_command(args) -> None:
    """Print every global configuration value."""
    global_config = config.load_global_config()
    for key, value in sorted(global_config.items()):
        print(f"{key} = {value}")
