MATCH_SCORE_PROMPT = """You are an AI recruiter analyzing job-candidate fit. Calculate a match score (0-100) between this job and candidate.

JOB DESCRIPTION:
{job_description}

CANDIDATE BIO:
{candidate_bio}

CANDIDATE SKILLS:
{skills}

Analyze the match and respond with a JSON object containing:
- score: number (0-100)
- matchedSkills: array of skills that match
- reasoning: string explaining the score
- keywordMatches: number of relevant keywords found
- skillMatches: number of skills that match

Consider:
1. Skill alignment
2. Experience relevance
3. Domain knowledge
4. Career progression fit
5. Cultural fit indicators

Respond only with valid JSON.
"""


def build_match_prompt(job_description: str, candidate_bio: str, skills) -> str:
    return MATCH_SCORE_PROMPT.format(
        job_description=job_description.strip(),
        candidate_bio=candidate_bio.strip(),
        skills=", ".join(skills) if skills else "(none listed)",
    )
