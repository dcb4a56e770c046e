"""In-Memory Style Catalog - Infrastructure Layer"""

from typing import Any, Dict, Iterable, List, Optional

from ...domain.entity.staging import StyleDefinition
from ...domain.repository.style_catalog import StyleCatalog

DEFAULT_STYLES = (
    StyleDefinition(
        id="modern-minimalist",
        name="Modern Minimalist",
        description="Clean lines, neutral tones, minimal furniture",
        emoji="✨",
        prompt_template=(
            "Modern Minimalist style - Use clean lines, neutral tones (whites, grays, warm "
            "beiges), minimal but impactful furniture. Think simple geometric shapes, "
            "uncluttered spaces, and a few well-chosen statement pieces. Warm wood accents "
            "for texture."
        ),
    ),
    StyleDefinition(
        id="mid-century-modern",
        name="Mid-Century Modern",
        description="Retro-inspired, warm woods, iconic furniture pieces",
        emoji="🪑",
        prompt_template=(
            "Mid-Century Modern style - Use retro-inspired furniture with warm wood tones "
            "(walnut, teak), organic curves, tapered legs. Include iconic pieces like "
            "Eames-style chairs, low-profile sofas, starburst mirrors, and bold geometric "
            "patterns. Warm earthy color palette with pops of mustard, teal, or orange."
        ),
    ),
    StyleDefinition(
        id="scandinavian",
        name="Scandinavian",
        description="Light woods, white/cream palette, cozy hygge feel",
        emoji="🌿",
        prompt_template=(
            "Scandinavian style - Use light woods (birch, pine, ash), white and cream palette "
            "with soft pastels. Emphasize coziness (hygge) with wool throws, sheepskin rugs, "
            "and candles. Simple functional furniture, plenty of greenery, and natural light "
            "feel."
        ),
    ),
    StyleDefinition(
        id="traditional-classic",
        name="Traditional / Classic",
        description="Rich fabrics, dark woods, elegant and timeless",
        emoji="🏛️",
        prompt_template=(
            "Traditional Classic style - Use rich fabrics (velvet, silk, damask), dark wood "
            "furniture (mahogany, cherry), elegant and timeless pieces. Include ornate "
            "details, table lamps, framed artwork, and layered textiles. Color palette of "
            "deep blues, burgundy, gold, and cream."
        ),
    ),
    StyleDefinition(
        id="luxury",
        name="Luxury",
        description="High-end finishes, statement pieces, premium materials",
        emoji="💎",
        prompt_template=(
            "Luxury style - Use high-end, premium-looking furniture and finishes. Include "
            "statement pieces like a large chandelier effect, marble accents, metallic gold "
            "or brass fixtures, plush oversized seating, silk curtains, and designer-looking "
            "accessories. Think penthouse or high-end real estate listing."
        ),
    ),
    StyleDefinition(
        id="coastal",
        name="Coastal",
        description="Light blues, whites, natural textures, beachy relaxed vibe",
        emoji="🌊",
        prompt_template=(
            "Coastal style - Use a light, airy color palette of whites, soft blues, sandy "
            "beiges, and seafoam greens. Include natural textures like rattan, jute, "
            "driftwood, and linen. Relaxed, beachy furniture with slipcovered sofas, woven "
            "baskets, and nautical-inspired accessories."
        ),
    ),
    StyleDefinition(
        id="industrial-loft",
        name="Industrial Loft",
        description="Exposed elements, metal + wood, urban aesthetic",
        emoji="🏗️",
        prompt_template=(
            "Industrial Loft style - Use a mix of raw metal and reclaimed wood furniture. "
            "Include leather seating, Edison-style lighting, metal shelving, and "
            "urban-inspired accessories. Color palette of charcoal, rust, brown, and black "
            "with warm accent lighting."
        ),
    ),
    StyleDefinition(
        id="farmhouse",
        name="Farmhouse",
        description="Rustic warmth, shiplap vibes, comfortable and inviting",
        emoji="🏡",
        prompt_template=(
            "Farmhouse style - Use rustic, warm furniture with distressed wood finishes, "
            "comfortable oversized seating, and cozy textiles. Include farmhouse table, "
            "barn-door inspired elements, mason jar accessories, woven baskets, and a warm "
            "neutral palette with soft whites and natural wood tones."
        ),
    ),
)


class InMemoryStyleCatalog(StyleCatalog):
    """内存风格目录"""

    def __init__(self, styles: Iterable[StyleDefinition] = DEFAULT_STYLES):
        self._styles: Dict[str, StyleDefinition] = {}
        for style in styles:
            self.register_style(style)

    def get_style(self, style_id: str) -> Optional[StyleDefinition]:
        """获取风格"""
        return self._styles.get(style_id)

    def list_styles(self) -> List[StyleDefinition]:
        """列出所有风格 (按注册顺序)"""
        return list(self._styles.values())

    def register_style(self, style: StyleDefinition) -> None:
        """注册风格，同 ID 覆盖"""
        self._styles[style.id] = style


def styles_from_config(entries: Iterable[Dict[str, Any]]) -> List[StyleDefinition]:
    """从配置 (config.yaml 的 styles 列表) 构建风格定义"""
    styles = []
    for entry in entries:
        if not entry.get("id") or not entry.get("prompt"):
            raise ValueError(f"Style entry needs 'id' and 'prompt': {entry}")
        styles.append(
            StyleDefinition(
                id=entry["id"],
                prompt_template=entry["prompt"],
                name=entry.get("name", entry["id"]),
                description=entry.get("description", ""),
                emoji=entry.get("emoji", ""),
            )
        )
    return styles
