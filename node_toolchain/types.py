"""Shared Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NpmInstallOptions(BaseModel):
    """Flags for an ``npm install`` / ``npm ci`` run."""

    model_config = ConfigDict(frozen=True)

    clean_install: bool = False  # npm ci instead of npm install
    omit_dev: bool = False
    ignore_scripts: bool = False
    no_audit: bool = True
    no_fund: bool = True
    skip_if_up_to_date: bool = True

    def to_args(self) -> list[str]:
        args = ["ci" if self.clean_install else "install"]
        if self.omit_dev:
            args.append("--omit=dev")
        if self.ignore_scripts:
            args.append("--ignore-scripts")
        if self.no_audit:
            args.append("--no-audit")
        if self.no_fund:
            args.append("--no-fund")
        return args


class ManifestSelection(BaseModel):
    """The dependency manifest chosen for fingerprinting."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    lock_like: bool
