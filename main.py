from cli.app import cli


def main():
    """Entry point for the app-inventory CLI. Delegates to cli.app:cli."""
    cli(prog_name="app-inventory")


if __name__ == "__main__":
    main()
