EXPAND_SYSTEM_INSTRUCTION = (
    "You are a master of unfolding simple concepts into complex, multi-layered explanations. "
    "Provide structured data for visualizations (graph nodes/links) and a rich narrative. "
    "Return only valid JSON. Do not include markdown or extra text."
)


def build_expand_prompt(seed: str) -> str:
    return (
        f"Expand this idea into a comprehensive knowledge map: \"{seed}\"\n"
        "\n"
        "Output schema:\n"
        "{\n"
        "  \"title\": \"...\",\n"
        "  \"summary\": \"...\",\n"
        "  \"narrative\": \"...\",\n"
        "  \"keyInsights\": [{\"label\": \"...\", \"value\": 50}],\n"
        "  \"nodes\": [{\"id\": \"...\", \"group\": 1}],\n"
        "  \"links\": [{\"source\": \"<node id>\", \"target\": \"<node id>\"}],\n"
        "  \"imagePrompt\": \"...\"\n"
        "}\n"
        "Rules:\n"
        "  - Every field is required.\n"
        "  - keyInsights values are numbers between 1 and 100.\n"
        "  - links must only reference ids present in nodes.\n"
        "  - imagePrompt is a highly detailed visual prompt for an image generator based on this concept.\n"
    )


def build_image_prompt(prompt: str) -> str:
    return f"Cinematic, high-fidelity visualization of: {prompt}. Artistic and symbolic style."


def build_speech_text(text: str) -> str:
    return f"Read this summary elegantly: {text}"
