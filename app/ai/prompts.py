DRAFT_PROFILE_SYSTEM_PROMPT = """You extract a structured candidate profile from resume text.
Return one JSON object only, with these keys:
- "skills": list of {"name": string, "tier": "core" | "strong" | "peripheral"}.
  "core" for skills the candidate uses prominently or repeatedly, "strong" for solid
  secondary skills, "peripheral" for skills only mentioned in passing.
- "titles": list of job titles the candidate is suited for, e.g. "frontend engineer".
- "keywords": list of tools, domains and other useful search terms not already in skills.
- "experience": {"years": integer, "level": "entry" | "junior" | "mid" | "senior" | "lead"},
  or null when the resume does not make it clear.
Use only facts present in the resume. Do not invent employers, skills or years."""


def build_draft_profile_user_prompt(resume_text: str) -> str:
    return f"Resume text:\n<<<\n{resume_text}\n>>>"
