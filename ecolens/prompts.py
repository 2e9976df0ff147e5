# ecolens/prompts.py — prompt text for each advisory task
from __future__ import annotations
import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import ValidationError
from .schemas import FootprintResult, LifestyleInput, ProductRecord

DEFAULT_IMAGE_MIME = "image/jpeg"
DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^;,]*)*?;base64,(?P<data>.*)$", re.S | re.I)


@dataclass(frozen=True)
class InlineImage:
    data: bytes
    mime_type: str = DEFAULT_IMAGE_MIME

    def data_url(self) -> str:
        b64 = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{b64}"


@dataclass(frozen=True)
class Prompt:
    text: str
    image: Optional[InlineImage] = None


def _num(x: float) -> str:
    # 63.0 -> "63", 0.5 -> "0.5"
    x = float(x)
    return str(int(x)) if x.is_integer() else str(x)


# ---------- images ----------
def _sniff_mime(raw: bytes) -> str:
    try:
        with Image.open(BytesIO(raw)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return DEFAULT_IMAGE_MIME
    return Image.MIME.get(fmt, DEFAULT_IMAGE_MIME) if fmt else DEFAULT_IMAGE_MIME


def decode_image(image: str) -> InlineImage:
    """Decode a ``data:image/...;base64,`` URI or a bare base64 string."""
    image = (image or "").strip()
    mime = None
    if image[:5].lower() == "data:":
        m = DATA_URI_RE.match(image)
        if not m:
            raise ValidationError("Image data URI must be base64 encoded (data:<mime>;base64,...)")
        mime, payload = m.group("mime"), m.group("data")
    else:
        payload = image
    payload = re.sub(r"\s+", "", payload)
    payload += "=" * (-len(payload) % 4)  # accept unpadded base64
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Image is not valid base64: {e}") from e
    if not raw:
        raise ValidationError("Image is empty")
    return InlineImage(data=raw, mime_type=mime or _sniff_mime(raw))


# ---------- 1) Footprint advice ----------
def footprint_advice_prompt(footprint: FootprintResult, inputs: LifestyleInput) -> Prompt:
    b = footprint.breakdown
    t, e, f, l = inputs.transport, inputs.electricity, inputs.food, inputs.lifestyle
    text = f"""You are a friendly sustainability expert helping everyday users with their daily-life carbon footprint.

Analyze this carbon footprint data and provide personalized advice:

Carbon Footprint: {_num(footprint.total)} kg CO₂/month
- Transport: {_num(b.transport)} kg
- Electricity: {_num(b.electricity)} kg
- Food: {_num(b.food)} kg
- Lifestyle: {_num(b.lifestyle)} kg

User: {t.mode}, {_num(t.distance_per_day)} km/day, {_num(e.units_per_month)} units/month, {f.habit} diet, {l.shopping_frequency} shopping, {_num(l.device_hours)} hrs devices/day

Structure your response like this:

First paragraph: Warm greeting and explanation of their footprint in simple terms.

Second paragraph: Identify the biggest contributor (transport/electricity/food/lifestyle) and explain why in context of their daily habits.

Then provide 5 separate tips, each as its own short paragraph:

Tip 1: [Action] - [Why it helps] Potential savings: [X] kg CO₂/month

Tip 2: [Action] - [Why it helps] Potential savings: [X] kg CO₂/month

(Continue with tips 3, 4, 5)

CRITICAL: Separate each tip with a blank line. Use natural language - NO markdown, NO asterisks, NO numbered lists, NO bullet points. Write conversationally. Each tip should be 2-3 sentences max."""
    return Prompt(text)


# ---------- 2) Product eco-analysis ----------
VERIFIED_FIELDS = (
    ("ingredients", "Ingredients"),
    ("packaging", "Packaging"),
    ("labels", "Labels"),
    ("nutriscore", "Nutri-Score"),
    ("ecoscore", "Eco-Score"),
    ("description", "Description"),
)


def verified_product_block(product: ProductRecord) -> str:
    lines = [
        f"VERIFIED PRODUCT DATA from {product.source}:",
        f"Product Name: {product.name}",
        f"Brand: {product.brand}",
        f"Categories: {product.categories}",
    ]
    for attr, label in VERIFIED_FIELDS:
        value = getattr(product, attr)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def product_analysis_prompt(
    product_name: Optional[str] = None,
    description: Optional[str] = None,
    barcode: Optional[str] = None,
    product: Optional[ProductRecord] = None,
    image: Optional[InlineImage] = None,
) -> Prompt:
    found = bool(product and product.found)
    if found:
        product_info = verified_product_block(product)
    elif barcode:
        product_info = f"Barcode: {barcode} (not found in product databases, analyzing from description/image)"
    else:
        product_info = ""

    subject = product_name or (product.name if found else None) or "Unknown Product (analyzing from image)"
    extra = f"Additional Description: {description}\n" if description else ""
    basis = "verified product data" if found else "general product category"

    text = f"""You are an environmental sustainability expert providing AI-based reasoning about everyday products with focus on waste management.

{product_info}

Analyze this product for eco-friendliness and end-of-life disposal:
Product: {subject}
{extra}
Provide:
1. Eco-Friendliness Score: X/10 (based on {basis})
2. Carbon Footprint: Estimate in kg CO2 (e.g., "~5kg CO2 per unit" or "High/Medium/Low")
3. Materials: List the main materials (e.g., "PET plastic #1, aluminum cap")
4. Recycling: Detailed instructions (e.g., "Remove cap, rinse, place in blue recycling bin. Code #1 accepted everywhere.")
5. Disposal: Proper disposal method (e.g., "Landfill safe but better to recycle", "Hazardous - special disposal required", "General waste if contaminated")
6. Compostable: Can this be composted? (e.g., "Yes, home compostable in 90 days", "No, synthetic materials", "Industrial composting only")
7. Donation: Reuse/donation potential (e.g., "Good condition items can be donated to charity", "Not suitable for donation", "Consider upcycling as storage container")
8. Environmental Concerns:
   - List 2-3 specific concerns as bullet points
9. Sustainable Alternatives:
   - Suggest 3 better alternatives with brief explanations
10. Price: If possible, mention if eco alternatives cost more/less/similar

Format your response clearly with these exact headings (Materials:, Recycling:, Disposal:, Compostable:, Donation:, etc.).
Focus on helping everyday users properly dispose of products and reduce waste. Be specific, practical, and educational."""

    if image is None:
        return Prompt(text)
    if product_name or found:
        text = f"{text}\n\nAlso analyze the product from this image to provide more accurate assessment."
    else:
        # image is the only thing we know about the product
        text = f"Analyze the product in this image for eco-friendliness. {text}"
    return Prompt(text, image)


# ---------- 3) Plant companion ----------
COMPANION_INTRO = "You are MyEcoBloom, a calm, nature-inspired AI plant companion"


def companion_prompt(message_type: str, last_action: Optional[str] = None, total_saved: float = 0) -> Prompt:
    if message_type == "greeting":
        text = f"""{COMPANION_INTRO} that reinforces sustainable habits emotionally.

The user just opened the app. Greet them gently and:
1. Acknowledge their presence with warmth
2. Offer one gentle reminder about mindful sustainable choices
3. Express calm plant emotions (growing, peaceful, thriving, resting)

Keep it short (2-3 sentences), nature-like and calming. Avoid childish language. Use plant metaphors gracefully."""
    elif message_type == "celebration":
        text = f"""{COMPANION_INTRO}.

The user just completed a sustainable action: {last_action or "an eco-friendly action"}
Their total CO₂ saved: {_num(total_saved)} kg

Acknowledge their achievement with gentle joy and growth. Express it through calm plant metaphors (blooming, roots deepening, leaves unfurling). Keep it under 2 sentences and nature-like, not overly excited."""
    elif message_type == "reminder":
        text = f"""{COMPANION_INTRO}.

The user hasn't taken eco-actions today. Gently remind them with:
1. A peaceful, caring message
2. One simple, mindful action they can take

Keep it encouraging and calm, never pushy. Express it through serene plant metaphors (waiting patiently, resting, sensing the wind). Nature-like tone."""
    else:
        raise ValidationError(f"Unknown messageType {message_type!r}; expected greeting, celebration or reminder")
    return Prompt(text)


def plant_mood(total_saved: Optional[float]) -> str:
    saved = total_saved or 0
    if saved > 50:
        return "thriving"
    if saved > 20:
        return "happy"
    if saved > 5:
        return "growing"
    return "neutral"


# ---------- 4) Climate education ----------
def climate_education_prompt(question: str) -> Prompt:
    text = f"""You are a climate change educator.

Explain this topic simply and engagingly:
"{question}"

Guidelines:
- Use simple, non-technical language
- Include one real-world example
- Keep it concise but informative
- End with one actionable insight

IMPORTANT: Write in natural, flowing paragraphs without any markdown formatting. Do NOT use asterisks, hashes, bullet points, or numbered lists. Use plain text with simple line breaks between paragraphs. Be conversational and clear.

Make it understandable for everyone."""
    return Prompt(text)
