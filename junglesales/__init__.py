"""
Jungle Sales
============

Companies registered by sales users, each with a countdown that a daily
job winds down until the company expires into the *graveyard* tier.

Sub‑modules
~~~~~~~~~~~
- :pymod:`junglesales.models`        – ``Company`` / ``CompanyUpdate`` / ``User`` dataclasses
- :pymod:`junglesales.db`            – SQLModel tables and the store adapter
- :pymod:`junglesales.company_repo`  – ``CompanyRepository`` CRUD façade
- :pymod:`junglesales.users`         – ``UserRepository`` + password hashing
- :pymod:`junglesales.decay`         – countdown transition (`next_state`)
- :pymod:`junglesales.scheduler`     – ``DecayScheduler`` daily job
- :pymod:`junglesales.cli`           – command line entry point

Quick start
-----------
>>> from junglesales.decay import next_state
>>> from junglesales.models import Company
>>> next_state(Company("Acme", time_stamp=1, level=3))
CompanyUpdate(user=0, phone_number=None, time_stamp=0, level=3, tier='graveyard')
"""

__all__ = [
    "models",
    "db",
    "company_repo",
    "users",
    "decay",
    "scheduler",
    "cli",
]

__version__ = "0.1.0"
