#!/usr/bin/env python3
"""
Registrar un usuario directamente en usuarios.json.

Uso:
  python scripts/add_user.py --username ana [--password secreto]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from galeria.core.config import get_settings
from galeria.core.security import build_hasher
from galeria.services.user_registry import UserRegistry


def main() -> None:
    ap = argparse.ArgumentParser(description="Registrar usuario en usuarios.json")
    ap.add_argument("--username", required=True, help="Nombre de usuario (distingue mayusculas)")
    ap.add_argument("--password", help="Contraseña (por defecto: se pide en la terminal)")
    args = ap.parse_args()

    settings = get_settings()
    registry = UserRegistry(
        settings.users_file,
        hasher=build_hasher(settings.argon2_time_cost, settings.argon2_memory_cost, settings.argon2_parallelism),
    )
    username = (args.username or "").strip()
    password = args.password or getpass.getpass("Contraseña: ")
    registry.register(username, password)
    print("OK: usuario registrado")
    print(f"  Usuario: {username}")
    print(f"  Archivo: {settings.users_file}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
