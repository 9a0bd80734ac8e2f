"""
Rendu PDF de la facture d'une commande (reportlab).
- Mise en page fixe: séparateur, une ligne par article "<titre> - <qté> x $<prix>", séparateur, "Total Price: $<somme>".
- Le total est recalculé à partir des snapshots de la commande, jamais repris d'une entrée client.
- Chaque ligne est écrite avec la première police qui couvre tous ses caractères: Helvetica (WinAnsi),
  puis les TrueType Unicode configurées ou présentes sur le système, puis les polices CID de reportlab
  (idéogrammes/kana, hangul). Si aucune ne couvre la ligne, le rendu échoue: aucun caractère n'est perdu.
- Rendu déterministe (invariant=1, sans compression): deux rendus d'une même commande sont identiques octet pour octet.
- L'autorisation est vérifiée avant la production du moindre octet.
- Le document est écrit dans un SpooledTemporaryFile (déversé sur disque au-delà de INVOICE_SPOOL_MAX_SIZE)
  puis relu par morceaux. Limite connue: canvas.save() de reportlab sérialise encore le document complet
  en mémoire le temps de l'écriture; le spool garantit seulement qu'il n'y reste pas pendant le téléversement.
"""
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple
import logging
import os
import tempfile

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from storefront.config import INVOICE_FONT_PATHS, INVOICE_SPOOL_MAX_SIZE
from storefront.errors import InvoiceGenerationError, UnauthorizedError
from storefront.models import Identity, Order, format_amount

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = "----------------------"
TRAILING_SEPARATOR = "---"
FONT_NAME = "Helvetica"
CJK_FONT_NAME = "STSong-Light"
HANGUL_FONT_NAME = "HYSMyeongJo-Medium"
LINE_FONT_SIZE = 14
TOTAL_FONT_SIZE = 20
MARGIN = 72
CHUNK_SIZE = 16 * 1024

SYSTEM_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
)
UNICODE_FONT_PATHS = tuple(INVOICE_FONT_PATHS) + SYSTEM_FONT_PATHS

# (nom enregistré, points de code couverts); chargé une fois par processus
_unicode_font_cache: Optional[Tuple[Tuple[str, frozenset], ...]] = None

def _unicode_fonts() -> Tuple[Tuple[str, frozenset], ...]:
    global _unicode_font_cache
    if _unicode_font_cache is None:
        fonts: List[Tuple[str, frozenset]] = []
        for path in UNICODE_FONT_PATHS:
            if not os.path.isfile(path):
                continue
            name = "Invoice-" + os.path.splitext(os.path.basename(path))[0].replace(" ", "")
            try:
                font = TTFont(name, path)
            except (TTFError, OSError):
                logger.warning("invoices.renderer font skipped path=%s", path, exc_info=True)
                continue
            pdfmetrics.registerFont(font)
            fonts.append((name, frozenset(font.face.charToGlyph)))
        _unicode_font_cache = tuple(fonts)
    return _unicode_font_cache

def _in_base_encoding(text: str) -> bool:
    try:
        text.encode("cp1252")
    except UnicodeEncodeError:
        return False
    return True

def _is_cjk(cp: int) -> bool:
    return (
        0x3000 <= cp <= 0x30FF      # ponctuation CJK, hiragana, katakana
        or 0x3400 <= cp <= 0x4DBF
        or 0x4E00 <= cp <= 0x9FFF
        or 0xF900 <= cp <= 0xFAFF
        or 0xFF00 <= cp <= 0xFFEF   # formes pleine chasse
    )

def _is_hangul(cp: int) -> bool:
    return 0x1100 <= cp <= 0x11FF or 0x3130 <= cp <= 0x318F or 0xAC00 <= cp <= 0xD7AF

def _cid_font(name: str) -> str:
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(name))
    return name

def _font_for(text: str) -> str:
    """Première police couvrant tous les caractères de `text`; InvoiceGenerationError sinon."""
    if _in_base_encoding(text):
        return FONT_NAME
    codepoints = {ord(c) for c in text}
    for name, covered in _unicode_fonts():
        if codepoints <= covered:
            return name
    if all(cp < 0x80 or _is_cjk(cp) for cp in codepoints):
        return _cid_font(CJK_FONT_NAME)
    if all(cp < 0x80 or _is_hangul(cp) or 0x3000 <= cp <= 0x303F for cp in codepoints):
        return _cid_font(HANGUL_FONT_NAME)
    raise InvoiceGenerationError(f"Aucune police ne couvre la ligne de facture: {text!r}")

def invoice_name(order_id: str) -> str:
    return f"invoice-{order_id}.pdf"

def authorize(order: Order, requester: Identity) -> None:
    if order.user_id != requester.id:
        raise UnauthorizedError("Commande appartenant à un autre utilisateur")

def invoice_lines(order: Order) -> Iterator[Tuple[str, int]]:
    """(texte, taille de police) dans l'ordre d'affichage; total cumulé en une passe."""
    yield HEADER_SEPARATOR, 12
    total = Decimal("0")
    for line in order.lines:
        total += line.subtotal
        yield f"{line.product.title} - {line.quantity} x ${format_amount(line.product.price)}", LINE_FONT_SIZE
    yield TRAILING_SEPARATOR, LINE_FONT_SIZE
    yield f"Total Price: ${format_amount(total)}", TOTAL_FONT_SIZE

def _draw(order: Order, out) -> None:
    width, height = letter
    pdf = canvas.Canvas(out, pagesize=letter, invariant=1, pageCompression=0)
    pdf.setTitle(invoice_name(order.id or ""))
    y = height - MARGIN
    for text, size in invoice_lines(order):
        font = _font_for(text)
        for chunk in simpleSplit(text, font, size, width - 2 * MARGIN) or [""]:
            leading = size * 1.2
            if y - leading < MARGIN:
                pdf.showPage()
                y = height - MARGIN
            pdf.setFont(font, size)
            y -= leading
            pdf.drawString(MARGIN, y, chunk)
    pdf.save()

def render_chunks(order: Order, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Produit le document en morceaux; InvoiceGenerationError si le rendu échoue."""
    with tempfile.SpooledTemporaryFile(max_size=INVOICE_SPOOL_MAX_SIZE) as out:
        try:
            _draw(order, out)
        except InvoiceGenerationError:
            logger.error("invoices.renderer failed order_id=%s reason=font", order.id)
            raise
        except Exception as exc:
            logger.exception("invoices.renderer failed order_id=%s", order.id)
            raise InvoiceGenerationError(f"Rendu impossible pour la commande {order.id}") from exc
        out.seek(0)
        while True:
            chunk = out.read(chunk_size)
            if not chunk:
                break
            yield chunk

def render(order: Order, requester: Identity) -> Iterator[bytes]:
    """
    Vérifie la propriété puis renvoie le flux du document.
    - UnauthorizedError levée immédiatement (avant toute itération, donc zéro octet produit).
    """
    authorize(order, requester)
    return render_chunks(order)
