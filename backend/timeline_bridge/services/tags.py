# Metadata stamped into a timeline entry's style bag so reverse conversion can
# tell a hook from a CTA from end-card text; the editor itself ignores them.
TAG_KEY = "__ksTag"
CUES_KEY = "__ksCues"

TAG_HOOK = "__ks_hook"
TAG_CTA = "__ks_cta"
TAG_ENDCARD_BG = "__ks_endcard_bg"
TAG_ENDCARD_TEXT = "__ks_endcard_text"


def tag_of(styles: dict | None) -> str | None:
    if not styles:
        return None
    return styles.get(TAG_KEY)
