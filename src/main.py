"""Entry point: open the window and run the ocean scene until it is closed."""

from core.engine import Engine


def main(enable_timing: bool = False):
    Engine(enable_timing=enable_timing).run()


if __name__ == "__main__":
    main()
