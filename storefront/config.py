# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe, Storage)
- Fournit les chemins de redirection du checkout et les réglages de pagination/monnaie
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Supabase: URL et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Supabase Storage: bucket des factures et délai réseau (secondes)
INVOICE_BUCKET = _clean_env(os.getenv("INVOICE_BUCKET") or "invoices")
STORAGE_TIMEOUT = _int_env("STORAGE_TIMEOUT", 30)

# Factures PDF: polices TrueType Unicode supplémentaires (chemins séparés par des virgules)
# et taille au-delà de laquelle le document rendu est déversé sur disque (octets)
INVOICE_FONT_PATHS = [p.strip() for p in _clean_env(os.getenv("INVOICE_FONT_PATHS") or "").split(",") if p.strip()]
INVOICE_SPOOL_MAX_SIZE = _int_env("INVOICE_SPOOL_MAX_SIZE", 1024 * 1024)

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Stripe: clés et délai réseau
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_TIMEOUT = _int_env("STRIPE_TIMEOUT", 20)
CURRENCY = _clean_env(os.getenv("CURRENCY") or "usd").lower()

# Pages de succès/annulation du checkout
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/api/v1/payments/confirm")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/api/v1/cart")

# Catalogue: taille de page de la liste produits
ITEMS_PER_PAGE = _int_env("ITEMS_PER_PAGE", 4)

BASE_URL = _clean_env(os.getenv("BASE_URL") or "http://localhost:8000")
