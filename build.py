import os
import subprocess
import sys


def build():
    args = [
        "pyinstaller",
        "main.py",
        "--name",
        "CampusPortal",
        "--icon",
        "app.ico",
        "--add-data",
        f"app.ico{os.pathsep}.",
        "--clean",
        "--onefile",
        "--collect-all",
        "flet_desktop",  # Flet desktop runtime
        "--collect-data",
        "flet",  # icons.json etc.
        "--collect-submodules",
        "portal",  # namespace package, not discovered by import analysis alone
        "--hidden-import",
        "httpx",
        "--hidden-import",
        "pydantic",
        "--hidden-import",
        "email_validator",  # imported lazily by pydantic for EmailStr
    ]

    # Keep the console on CI so build logs stay visible
    if not os.environ.get("CI"):
        args.append("--noconsole")

    print(f"Running: {' '.join(args)}")
    result = subprocess.run(args)

    if result.returncode == 0:
        print("\nBuild successful! Executable is in the 'dist' folder.")
    else:
        print("\nBuild failed.")
        sys.exit(result.returncode)


if __name__ == "__main__":
    build()
