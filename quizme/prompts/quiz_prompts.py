QUIZ_SYSTEM_PROMPT = (
    "You are an expert quiz creator. Generate educational quiz questions in valid JSON format only. "
    "Do not include any markdown formatting or code blocks. Ensure all options are unique and non-empty."
)

ADAPTIVE_SYSTEM_PROMPT = (
    "You are an expert adaptive learning quiz creator. Generate educational quiz questions that help "
    "students improve in their weak areas. Return valid JSON format only without markdown formatting."
)

WEAK_TOPICS_SYSTEM_PROMPT = (
    "You are an expert educational analyst who identifies learning gaps. Return valid JSON only."
)

TYPE_INSTRUCTIONS = {
    "mcq": "Multiple Choice Questions (MCQ) with 4 options and only 1 correct answer",
    "true-false": "True/False questions with 2 options",
    "multiple-correct": "Multiple Choice Questions with 4 options where 2 or more answers can be correct",
}

QUIZ_GENERATION_TEMPLATE = """Generate {n} {difficulty_description} quiz questions about "{topic}".{focus_context}

IMPORTANT: You MUST ONLY generate questions of these types: {type_instructions}
Do NOT generate questions of any other type. Each question must be one of: {type_list}.

For each question, provide:
1. A clear question text
2. The appropriate number of options (4 for MCQ/multiple-correct, 2 for true-false)
3. ALL options MUST be unique - no duplicate options allowed
4. ALL options MUST have non-empty text
5. The correct answer(s) as an array of indices (0-based)
6. A brief explanation (2-3 sentences) of why the answer is correct
{freshness}
Return the response as a JSON object with this exact structure:
{{
  "questions": [
    {{
      "questionText": "What is...?",
      "questionType": "mcq" | "true-false" | "multiple-correct",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswers": [0],
      "explanation": "Explanation here..."
    }}
  ]
}}

Distribute question types evenly across the requested types ({type_list}). Make sure all questions are educational, accurate, and relevant to the topic. Remember: ALL options must be unique within each question and cannot be empty."""

FRESHNESS_NOTE = """
CRITICAL: Ensure questions are DIFFERENT from any previous quiz. Create fresh questions that test the same concepts in new ways.
"""

WEAK_AREAS_TEMPLATE = """

IMPORTANT FOCUS AREAS:
The student struggled with these specific concepts: {weak_topics}

Generate approximately {weak_count} questions (70-80% of total) that specifically address and reinforce these weak areas.
The remaining {other_count} questions should cover other aspects of "{topic}" to provide comprehensive learning.

For weak area questions:
- Approach the concepts from different angles
- Build understanding progressively
- Include related subtopics that strengthen these concepts
- Ensure questions are educational and help fill the knowledge gaps"""

REINFORCEMENT_TEMPLATE = """

The student had some incorrect answers in a previous quiz. Generate questions that help reinforce understanding of "{topic}" while avoiding repetition of the exact same questions."""

WRONG_ANSWER_TEMPLATE = """Question {number}: {question_text}
Type: {question_type}
Correct concept: {explanation}"""

WEAK_TOPICS_TEMPLATE = """Analyze these incorrect answers from a quiz about "{topic}" and identify 3-5 specific underlying topics or concepts the student needs to work on.

{wrong_answers}

Return a JSON object with an array of topics (short phrases, 2-4 words each). These should be specific subtopics or concepts within "{topic}".

Example format:
{{
  "topics": ["variable scope", "closures", "event loop"]
}}

Be specific and actionable. Focus on the underlying concepts, not just the question content."""
