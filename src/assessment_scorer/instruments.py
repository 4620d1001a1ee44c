"""Built-in instrument documents shipped with the package.

The BBD, CLIQI and Work Values instruments live as YAML documents under
``data/``. They are parsed once and cached; callers get the same immutable
configuration on every lookup.
"""

from functools import lru_cache
from pathlib import Path

import yaml

from .schema import Instrument

DATA_DIR = Path(__file__).parent / "data"

BUILTIN_FILES = {
    "bbd-assessment": "bbd.yaml",
    "cliqi-assessment": "cliqi.yaml",
    "work-values": "work_values.yaml",
}


class UnknownInstrumentError(KeyError):
    """Raised when a built-in instrument id or code is not known."""


def _read(filename: str) -> Instrument:
    with open(DATA_DIR / filename, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return Instrument.model_validate(data)


@lru_cache(maxsize=None)
def _builtin_instruments() -> dict[str, Instrument]:
    return {key: _read(filename) for key, filename in BUILTIN_FILES.items()}


def list_builtin_instruments() -> list[Instrument]:
    """All built-in instruments, in a stable order."""
    return list(_builtin_instruments().values())


def load_builtin_instrument(key: str) -> Instrument:
    """Look up a built-in instrument by id (``cliqi-assessment``) or code (``CLIQI-001``).

    Raises:
        UnknownInstrumentError: If no built-in instrument matches.
    """
    instruments = _builtin_instruments()
    if key in instruments:
        return instruments[key]

    key_upper = key.upper()
    for instrument in instruments.values():
        if instrument.code.upper() == key_upper:
            return instrument

    raise UnknownInstrumentError(key)
