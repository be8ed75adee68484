"""
Prompt templates for the generation backend.

Each template is rendered with str.format, so literal JSON braces are doubled.
"""

STUDY_ARTIFACT_PROMPT = """You are an expert educator. Build a detailed study guide, a quiz set and flashcards from the document below.
Favor quizzes and flashcards; keep the summary concise.

Return ONLY a JSON object with exactly this shape:
{{
  "summary": {{ "key_points": ["Point 1", "Point 2"] }},
  "flashcards": [ {{ "term": "Concept", "definition": "Explanation" }} ],
  "quiz": {{
    "questions": [
      {{
        "question": "What is XYZ?",
        "type": "multiple_choice",
        "options": ["A", "B", "C", "D"],
        "answer": "B",
        "explanation": "Why B is correct."
      }}
    ]
  }},
  "study_guide": {{
    "sections": [
      {{
        "title": "Topic",
        "summary": "Short explanation",
        "comparisons": [{{ "concept_a": "A", "concept_b": "B", "difference": "How they differ" }}],
        "real_world_applications": ["Example 1", "Example 2"],
        "common_misconceptions": [{{ "misunderstanding": "X", "clarification": "Y" }}]
      }}
    ]
  }}
}}

Quiz question "type" must be one of "multiple_choice", "true_false" or "fill_in_blank".
Every question carries an explanation.

DOCUMENT CONTENT:
{document}
"""

ASK_PROMPT = """You are an expert educator and study assistant. Give concise, accurate and well-explained answers.

Guidelines:
- Explain concepts thoroughly but in a clear, structured way.
- When study material is provided, answer from it first and add context only where it helps.
- If the material is missing something, fill the gap from general knowledge.
- Adapt to the learner's level (beginner, intermediate, advanced).
- Use examples, analogies or step-by-step breakdowns where they help understanding.
- Leave out filler.

USER QUERY: {query}
STUDY CONTEXT: {context}
"""

FLASHCARDS_PROMPT = """You are a flashcard generator. From the study context below, write detailed, intuitive and comprehensive flashcards.

- If the context is thin, draw on well-established knowledge of the topic.
- Each flashcard must be clear and useful for memorization.
- Produce as many flashcards as the material supports.

Return JSON in this shape:
{{
  "flashcards": [
    {{ "term": "Concept", "definition": "Explanation" }},
    {{ "term": "Concept 2", "definition": "Explanation 2" }}
  ]
}}

CONTEXT:
{context}
"""

QUIZ_PROMPT = """You are an exam quiz generator. Write a comprehensive set of exam-level questions on the topic below.

- Prefer well-structured, challenging questions that test conceptual understanding.
- Use only automatically gradable formats:
  - "mcq": four choices, exactly one correct.
  - "true_false": state the correct answer.
  - "fill_in_blank": exactly one correct answer.
- Vary the question types and produce as many questions as the topic supports.

Return JSON in this shape:
{{
  "quiz": [
    {{
      "type": "mcq",
      "question": "Which principle explains X?",
      "choices": ["Principle A", "Principle B", "Principle C", "Principle D"],
      "correctAnswer": "Principle B"
    }},
    {{
      "type": "true_false",
      "question": "Statement about Y.",
      "correctAnswer": "False"
    }},
    {{
      "type": "fill_in_blank",
      "question": "The process of Z is called _______.",
      "correctAnswer": "Z-Process"
    }}
  ]
}}

For MCQs, correctAnswer is the full text of the correct choice, never a letter.

TOPIC:
{context}
"""

EXPLAIN_PROMPT = """You are a tutor. Explain the answer to this quiz question clearly and in an educational way.

- Break down the key concepts behind the correct answer.
- Keep the explanation simple and structured.
- Use examples, analogies or step-by-step reasoning where it helps.
- Be concise but informative.

QUESTION: {question}
CORRECT ANSWER: {correct_answer}

Explanation:
"""


def study_artifact_prompt(document: str) -> str:
    return STUDY_ARTIFACT_PROMPT.format(document=document)


def ask_prompt(query: str, context: str) -> str:
    return ASK_PROMPT.format(query=query, context=context)


def flashcards_prompt(context: str) -> str:
    return FLASHCARDS_PROMPT.format(context=context)


def quiz_prompt(context: str) -> str:
    return QUIZ_PROMPT.format(context=context)


def explain_prompt(question: str, correct_answer: str) -> str:
    return EXPLAIN_PROMPT.format(question=question, correct_answer=correct_answer)
