# tools/gen_param_docs.py
"""
Write a documented parameter template for every supported dimension.

Run manually after adding or changing a built-in model:

    python tools/gen_param_docs.py docs/parameters
"""
import sys
from pathlib import Path

from fluidbc import ParameterHandler, create_catalog

ROOT = Path(__file__).resolve().parents[1]


def generate_parameter_docs(out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    catalog = create_catalog()
    written = []
    for dim in catalog.dims:
        prm = ParameterHandler()
        catalog[dim].declare_parameters(prm)
        path = out_dir / f"fluid_pressure_boundary_{dim}d.toml"
        path.write_text(prm.to_toml(), encoding="utf-8")
        written.append(path)
    return written


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else ROOT / "docs" / "parameters"
    for p in generate_parameter_docs(target):
        print(p)
