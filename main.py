"""vcpu-inventory 실행 진입점 (python main.py 또는 console script)"""

from cli.app import cli


def main() -> None:
    cli(prog_name="vcpu-inventory")


if __name__ == "__main__":
    main()
