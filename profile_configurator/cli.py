# profile_configurator/cli.py
"""Generate main.tf (and owner_id_mapping.txt) from a YAML/JSON input file.

    python -m profile_configurator.cli input.yaml -o out/
"""
from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import List
import yaml
from .config import AppConfig, default_config, load_config
from .generator import TerraformGenerationOutput, generate_terraform_config
from .keycloak import ClientIdFetchError, KeycloakClient
from .owners import needs_owner_lookup, resolve_owner_ids
from .schema import ValidationError, parse_values

def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path

def write_output(out: TerraformGenerationOutput, out_dir: Path) -> List[Path]:
    files = [_write(out_dir / "main.tf", out.full_terraform_config + "\n")]
    if out.owner_id_mapping:
        files.append(_write(out_dir / "owner_id_mapping.txt", out.owner_id_mapping + "\n"))
    return files

def _read_input(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise RuntimeError(f"error reading {path}: {e}")

def run(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate Solace ACL/auth profile Terraform")
    parser.add_argument("input", help="YAML or JSON file with the profile values")
    parser.add_argument("-o", "--out-dir", default=".", help="Directory for main.tf")
    parser.add_argument("--config", default=None, help="config.yaml (defaults apply if omitted)")
    parser.add_argument("--fetch-owners", action="store_true",
                        help="Fetch subscriber queue owner ids from Keycloak")
    parser.add_argument("--print", dest="print_only", action="store_true",
                        help="Print the configuration instead of writing files")
    args = parser.parse_args(argv)

    try:
        cfg: AppConfig = load_config(args.config) if args.config else default_config()
        data = _read_input(args.input)
    except RuntimeError as e:
        print(f"[cli] {e}", file=sys.stderr)
        return 1

    try:
        values = parse_values(data, max_instances=cfg.generator.max_instances,
                              require_owner=not args.fetch_owners)
    except ValidationError as e:
        for field, msg in e.errors.items():
            print(f"[cli] {field or 'input'}: {msg}", file=sys.stderr)
        return 2

    owner_ids = None
    if args.fetch_owners and needs_owner_lookup(values):
        client = KeycloakClient(cfg.keycloak)
        try:
            owner_ids = resolve_owner_ids(values, client)
        except ClientIdFetchError as e:
            print(f"[cli] {e}", file=sys.stderr)
            return 1
        finally:
            client.close()

    out = generate_terraform_config(values, owner_ids, cfg.generator)
    if args.print_only:
        print(out.full_terraform_config)
        if out.owner_id_mapping:
            print("\n# Owner ID mapping\n" + out.owner_id_mapping)
        return 0

    for f in write_output(out, Path(args.out_dir)):
        print(f"[cli] wrote {f}")
    return 0

def main() -> None:
    sys.exit(run())

if __name__ == "__main__":
    main()
