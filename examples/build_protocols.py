"""Regenerate the example protocol package.

Usage:
    python examples/build_protocols.py [output_dir]
"""

import sys
from pathlib import Path

from wiregen.generator import load, validate
from wiregen.generator.naming import module_name
from wiregen.generator.python import render

PROTOCOL_DIR = Path(__file__).parent / "protocol"
PROTOCOLS = ["wayland"]


def main() -> None:
    output = Path(sys.argv[1] if len(sys.argv) > 1 else "proto")

    # Render everything before touching the output directory
    modules: dict[str, str] = {}
    for protocol in PROTOCOLS:
        proto = load(PROTOCOL_DIR / f"{protocol}.toml")
        validate(proto)
        modules[module_name(proto.name)] = render(proto)

    output.mkdir(parents=True, exist_ok=True)
    with open(output / "__init__.py", "w", encoding="utf-8") as f:
        f.write("# Auto-generated file. Do not edit.\n")
        for name in modules:
            f.write(f"from .{name} import *\n")
    for name, code in modules.items():
        (output / f"{name}.py").write_text(code, encoding="utf-8")
        print(f"  wrote {output / name}.py")


if __name__ == "__main__":
    main()
