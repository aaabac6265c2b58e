from pathlib import Path

from setuptools import find_packages, setup

try:
    from chainerr.utils.config_reference import write_markdown as write_config_markdown
except Exception as exc:  # pragma: no cover - setup-time safety
    print(f"Warning: unable to import config reference generator: {exc}")
    write_config_markdown = None

if write_config_markdown:
    try:
        write_config_markdown(Path("docs") / "config_reference.md")
    except Exception as exc:  # pragma: no cover - setup-time safety
        print(f"Warning: unable to generate config reference: {exc}")


setup(
    name="chainerr",
    version="1.0.0",
    description="Exceptions with nested cause chains, recursive text/JSON rendering and argument guards.",
    packages=find_packages(include=["chainerr", "chainerr.*"]),
    package_data={"chainerr": ["configs/*.yaml"]},
    python_requires=">=3.9",
    install_requires=Path("requirements.txt").read_text(encoding="utf-8").splitlines(),
    extras_require={"test": ["pytest>=7"]},
)
