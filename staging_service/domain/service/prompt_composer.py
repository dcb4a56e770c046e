"""Prompt Composer Domain Service - Domain Layer

Builds the instruction sent upstream for one variation. Pure: no I/O, no
clock, no randomness.
"""

from typing import Optional

BASE_STAGING_PROMPT = """You are a professional real estate photo stager. Your task is to add furniture, decor, and staging elements to this room photo.

CRITICAL RULES - YOU MUST FOLLOW THESE EXACTLY:
- Do NOT alter the room structure: walls, floors, ceilings, windows, doors must remain EXACTLY as they are in the original photo
- Do NOT change lighting conditions, wall colors, or flooring materials
- Do NOT remove any existing permanent fixtures (built-in shelves, countertops, etc.)
- Do NOT change the camera angle, perspective, or field of view
- ONLY ADD furniture, rugs, artwork, plants, decorations, and soft furnishings
- The staging must look photorealistic and professional, as if the furniture is truly in the room
- Maintain the exact same photo quality, resolution, and style
- Ensure furniture is properly scaled to the room dimensions
- Place furniture in realistic positions (not floating, properly grounded)"""

DEFAULT_STYLE_PROMPT = "Stage this room with tasteful, modern furniture and decor."

# 索引 0 为基础风格
VARIATION_CLAUSES = (
    "",
    "Use a slightly different furniture arrangement and color palette than you "
    "normally would. Try an alternative layout.",
    "Try a bolder, more distinctive design interpretation while staying within "
    "this style family. Make it stand out.",
)


def variation_clause(variation_index: int) -> str:
    """返回变体附加语；超出范围时返回空字符串"""
    if 0 <= variation_index < len(VARIATION_CLAUSES):
        return VARIATION_CLAUSES[variation_index]
    return ""


def compose(style_template: str, custom_text: Optional[str], variation_index: int) -> str:
    """组合最终提示词

    Args:
        style_template: 风格模板 (或默认风格提示词)
        custom_text: 用户附加说明 (原样追加)
        variation_index: 变体索引

    Returns:
        完整提示词
    """
    sections = [BASE_STAGING_PROMPT, f"Style: {style_template}"]

    if custom_text:
        sections.append(f"Additional instructions from user: {custom_text}")

    clause = variation_clause(variation_index)
    if clause:
        sections.append(clause)

    return "\n\n".join(sections)
