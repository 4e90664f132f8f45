"""Spell-check prompt for the completion model."""

import json

NO_ERRORS_MESSAGE = "Không phát hiện lỗi chính tả."

# Terms the model must always accept as correctly spelled
DOMAIN_TERMS = (
    "periodontal", "gingivitis", "periodontitis", "amalgam", "composite", "porcelain", "zirconia",
    "orthodontic", "aligners", "SureSmile", "DMD", "CBCT", "Primescan", "Kavo", "Digidoc",
    "Solea Laser", "VHF E5 Mill", "Primeprint", "Asiga", "osseointegration", "bruxism",
    "halitosis", "malocclusion", "endodontics", "prosthodontics", "pediatric dentistry",
    "oral surgery", "maxillofacial", "restorative dentistry", "cosmetic dentistry",
    "dental implants", "dental bonding", "crowns", "bridgework", "dental fillings",
    "oral cancer screenings", "teeth cleanings", "removable dentures", "root canal treatment",
    "dental sealants", "tooth extractions", "fluoride", "plaque", "tartar", "enamel", "dentin",
    "pulp", "cementum", "gingiva", "alveolar bone", "TMJ", "apicoectomy", "gingivectomy",
    "frenectomy", "occlusion", "anesthesia", "sedation", "nitrous oxide", "biocompatible",
    "radiography", "panoramic", "cephalometric", "bitewing", "periapical", "intraoral",
    "extraoral", "sterilization", "autoclave", "aseptic", "cross-contamination", "HIPAA",
    "CareCredit", "Patient Honey",
)

NO_ERRORS_REPLY = [
    {
        "errorWord": "",
        "originalSentence": "",
        "correctedSentence": "",
        "offset": 0,
        "message": NO_ERRORS_MESSAGE,
    }
]

_EXAMPLE_REPLY = [
    {
        "errorWord": "implantss",
        "originalSentence": "We provide high-quality implantss for patients.",
        "correctedSentence": "We provide high-quality implants for patients.",
        "offset": 28,
        "message": "Từ bị sai chính tả – dạng số nhiều không hợp lệ.",
    }
]

_TEMPLATE = """Act as an extremely strict English spell checker specialized in dental and medical content. Carefully analyze the provided text to detect **any spelling mistakes or invalid dental terminology**. Treat each line of the text as a distinct sentence.

Your responsibilities:
1. **Only detect spelling errors**. Do not flag grammar, capitalization, punctuation or formatting issues.
2. Treat the following terms as **correct** and never report them: {terms}.
3. **Ignore domain names** (e.g. example.com, patienthoney.com).
4. Detect **compound or merged words** such as "dentalimplant" or "zirconiacrown".
5. Flag invalid **plurals** such as "crownns", "teeths" or "implantses".
6. Never report an entry whose corrected sentence is identical to the original sentence.

Output format (mandatory):
- Reply with a single JSON array inside a fenced block that starts with ```json on its own line and ends with ``` on its own line. Write nothing outside the block.
- Each element has exactly these keys:
  - "errorWord": the misspelled word (English)
  - "originalSentence": the full sentence containing the error (English)
  - "correctedSentence": the same sentence with the spelling fixed (English)
  - "offset": integer character index of the error in the full input text
  - "message": a short description of the problem, written in Vietnamese
- If there are no spelling errors, reply with exactly:
```json
{no_errors}
```

Example reply:
```json
{example}
```

Text to check:

{text}"""


def build_prompt(text: str) -> str:
    """Return the spell-check prompt for *text*."""
    return _TEMPLATE.format(
        terms=", ".join(DOMAIN_TERMS),
        no_errors=json.dumps(NO_ERRORS_REPLY, ensure_ascii=False, indent=2),
        example=json.dumps(_EXAMPLE_REPLY, ensure_ascii=False, indent=2),
        text=text,
    )
