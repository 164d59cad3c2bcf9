import subprocess
import sys


def build() -> None:
    if sys.platform not in ("win32", "darwin") and not sys.platform.startswith("linux"):
        raise RuntimeError(f"unsupported build platform: {sys.platform}")

    command = [
        "pyinstaller",
        "--onefile",
        "--windowed",
        "--name",
        "PrismInstanceInstaller",
        "--paths",
        ".",
        "--hidden-import",
        "PIL._tkinter_finder",
        "--clean",
        "prism_instance_installer/__main__.py",
    ]

    subprocess.run(command, check=True)


if __name__ == "__main__":
    build()
