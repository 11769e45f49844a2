QUESTION_FORMAT_EXAMPLE = """[
  {
    "id": "q1",
    "question": "What is a Firewall?",
    "background_knowledge": "A firewall is a network security device...",
    "explanation": "Firewalls use rules to block unauthorized access.",
    "choices": [
      {
        "text": "A barrier blocking unauthorized networks",
        "is_correct": true,
        "explanation": "Correct because it filters traffic."
      }
    ]
  }
]"""

CONVERSION_PROMPT = """Please convert the following text/knowledge into a JSON array of quiz questions. The JSON must exactly match this structure:
[
  {
    "id": "unique-id-1",
    "question": "The question text?",
    "background_knowledge": "Helpful context to read before answering.",
    "explanation": "Why the correct answer is correct.",
    "choices": [
      {
        "text": "First choice",
        "is_correct": true,
        "explanation": "Explanation for this choice"
      },
      {
        "text": "Second choice",
        "is_correct": false,
        "explanation": "Explanation for this choice"
      }
    ]
  }
]

Here is the text to convert: """

JSON_ONLY_SUFFIX = "\n\nIMPORTANT: Output ONLY a valid JSON array. No markdown, no extra text."


def build_conversion_prompt(source_text: str) -> str:
    return CONVERSION_PROMPT + source_text + JSON_ONLY_SUFFIX


def build_fix_prompt(json_text: str, errors: list[str]) -> str:
    numbered = "\n".join(f"{i + 1}. {e}" for i, e in enumerate(errors))
    return (
        f"I have the following JSON for a quiz app:\n```json\n{json_text}\n```\n\n"
        f"But I am getting these validation errors:\n{numbered}\n\n"
        f"Can you fix the JSON for me?"
        + JSON_ONLY_SUFFIX
    )
