from invoice_desk.models.schemas import ColorPalette, ColorTemplate


def _template(id: str, name: str, description: str, primary: str, primary_light: str,
              accent: str, secondary: str = "#374151", text_light: str = "#6b7280",
              background: str = "#f9fafb") -> ColorTemplate:
    return ColorTemplate(
        id=id,
        name=name,
        description=description,
        colors=ColorPalette(
            primary=primary,
            primary_light=primary_light,
            secondary=secondary,
            accent=accent,
            text="#111827",
            text_light=text_light,
            border="#e5e7eb",
            background=background,
        ),
    )


# First entry is the fallback for unknown ids
COLOR_TEMPLATES: list[ColorTemplate] = [
    _template("purple", "Purple Professional", "Classic purple theme with modern appeal",
              "#9333ea", "#faf5ff", "#8b5cf6"),
    _template("blue", "Ocean Blue", "Professional blue theme for corporate invoices",
              "#2563eb", "#eff6ff", "#3b82f6"),
    _template("green", "Forest Green", "Nature-inspired green theme",
              "#059669", "#ecfdf5", "#10b981"),
    _template("red", "Executive Red", "Bold red theme for strong brand presence",
              "#dc2626", "#fef2f2", "#ef4444"),
    _template("orange", "Sunset Orange", "Warm orange theme for creative businesses",
              "#ea580c", "#fff7ed", "#fb923c"),
    _template("indigo", "Deep Indigo", "Sophisticated indigo theme for professional services",
              "#4338ca", "#eef2ff", "#6366f1"),
    _template("teal", "Modern Teal", "Fresh teal theme for tech and modern businesses",
              "#0d9488", "#f0fdfa", "#14b8a6"),
    _template("gray", "Monochrome", "Elegant grayscale theme for minimalist design",
              "#374151", "#f9fafb", "#4b5563", secondary="#6b7280",
              text_light="#9ca3af", background="#f3f4f6"),
]

_BY_ID = {t.id: t for t in COLOR_TEMPLATES}


def get_color_template(template_id: str | None) -> ColorTemplate:
    return _BY_ID.get(template_id or "", COLOR_TEMPLATES[0])
