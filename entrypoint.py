# entrypoint.py
import os
from profile_configurator.config import load_config
from profile_configurator import create_app
from waitress import serve

def main():
    cfg = load_config(os.getenv("PROFILE_CONFIGURATOR_CONFIG", "/app/config.yaml"))
    app = create_app(cfg)
    serve(app, listen=f"{cfg.http.bind}:{cfg.http.port}", threads=cfg.http.waitress_threads)

if __name__ == "__main__":
    main()
