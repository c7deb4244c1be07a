# profile_configurator/routes.py
from __future__ import annotations
from typing import Any, Dict, Tuple
from flask import Blueprint, Response, current_app, jsonify, request
from .config import AppConfig
from .generator import TerraformGenerationOutput, generate_terraform_config
from .keycloak import ClientIdFetchError, KeycloakClient
from .owners import needs_owner_lookup, resolve_owner_ids
from .schema import ValidationError, parse_values, values_to_wire

def _cfg() -> AppConfig:
    return current_app.config["CFG"]

def _generate_from_request() -> Tuple[Dict[str, Any], TerraformGenerationOutput]:
    cfg = _cfg()
    values = parse_values(request.get_json(silent=True) or {},
                          max_instances=cfg.generator.max_instances, require_owner=False)
    owner_ids = None
    if needs_owner_lookup(values):
        client = KeycloakClient(cfg.keycloak)
        try:
            owner_ids = resolve_owner_ids(values, client)
        finally:
            client.close()
    out = generate_terraform_config(values, owner_ids, cfg.generator)
    print(f"[api] generated {len(out.blocks)} blocks "
          f"type={values.application_type} instances={values.number_of_instances}")
    return values_to_wire(values), out

def create_blueprint() -> Blueprint:
    bp = Blueprint("profiles", __name__)

    @bp.errorhandler(ValidationError)
    def on_validation_error(e: ValidationError):
        return jsonify({"ok": False, "errors": e.errors}), 400

    @bp.errorhandler(ClientIdFetchError)
    def on_fetch_error(e: ClientIdFetchError):
        return jsonify({"ok": False, "error": str(e)}), 502

    @bp.get("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    @bp.post("/api/generate")
    def api_generate():
        wire, out = _generate_from_request()
        return jsonify({
            "input": wire,
            "fullTerraformConfig": out.full_terraform_config,
            "ownerIdMapping": out.owner_id_mapping,
            "blocks": list(out.blocks),
        })

    @bp.post("/api/generate/main.tf")
    def api_generate_file():
        _, out = _generate_from_request()
        return Response(out.full_terraform_config + "\n", mimetype="text/plain",
                        headers={"Content-Disposition": "attachment; filename=main.tf"})

    @bp.post("/api/client-id")
    def api_client_id():
        client = KeycloakClient(_cfg().keycloak)
        try:
            return jsonify({"clientId": client.fetch_new_client_id()})
        finally:
            client.close()

    return bp
