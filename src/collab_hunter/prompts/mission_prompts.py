OUTPUT_LANGUAGE = "Simplified Chinese"

SYSTEM_INSTRUCTION_LIST = """
You are a rigorous Data Extraction Agent.
Your output must be ONLY a valid JSON array containing the research results.
Do not include markdown formatting. Do not include conversational text.
If no results are found, output [].
Ensure all JSON strings are properly escaped.
""".strip()

SYSTEM_INSTRUCTION_OBJECT = """
You are a rigorous Data Extraction Agent.
Your output must be ONLY a single valid JSON object.
Do not include markdown formatting. Do not include conversational text.
Ensure all JSON strings are properly escaped.
""".strip()

COMMON_EXTRACTION_RULES = """
DATA EXTRACTION RULES:
- Use null for unknown optional fields. NEVER write placeholder strings such as "N/A", "unknown", "暂无" or "-".
- Use [] for empty lists.
- Only include URLs you actually found. Never invent links.
- Language: write every text value in {language}, regardless of the language of this instruction.
""".strip()


BRAND_SEARCH_PROMPT = """
TARGET BRAND: "{brand_name}"

CUSTOM SEARCH KEYWORDS (Must use these):
{keywords}

TARGET SOURCES/PLATFORMS:
{platforms}

OBJECTIVE:
Conduct a DEEP and COMPREHENSIVE search for co-branding / collaboration cases of this brand (last 3-4 years).

SEARCH EXECUTION:
1. Use the provided keywords to search.
2. PRIORITIZE searching within the requested domains/platforms (e.g. zhihu.com, reddit.com).
3. Look for "hidden gems" in social media discussions.
4. Verify details using multiple sources where possible.

{rules}
- Partner Intro: who the partner is and why they matter.
- Rights: every right MUST name a concrete physical, packaging or product change
  (e.g. "custom engraved back plate", "co-branded gift box"). Generic claims such as
  "brand exposure" or "marketing synergy" are NOT rights. Every case needs at least one right.
- Date: YYYY.MM.DD (use YYYY.MM or YYYY when the day or month is unknown).
- Source URLs: collect ALL relevant URLs (official, news, social) that verify the case.

JSON structure per item:
{{
  "projectName": "string (project overview)",
  "brandName": "{brand_name}",
  "partnerIntro": "string",
  "productName": "string (product / hardware model)",
  "date": "YYYY.MM.DD",
  "industry": "string or null",
  "visualStyle": "string or null",
  "campaignSlogan": "string or null",
  "impactResult": "string or null",
  "keyVisualUrl": "string or null",
  "rights": [{{"title": "string", "description": "string"}}],
  "insight": "string (marketing analysis)",
  "platformSource": "string (e.g. 'Reddit + Official')",
  "sourceUrls": ["string"]
}}
""".strip()


TREND_ANALYSIS_PROMPT = """
TOPIC: "{topic}"
TIME SCALE: {time_scale}
NUMBER OF TRENDS: return at most {limit} items.

FOCUS KEYWORDS (Must use these):
{keywords}

TARGET SOURCES/PLATFORMS:
{platforms}

OBJECTIVE:
Identify the IPs (characters, franchises, artists, games, art toys) that are trending for this topic
within the time scale and that are realistic co-branding partners.

{rules}
- momentum must be one of: "Emerging", "Peaking", "Stabilizing" (or null).
- commercialValue must be one of: "High", "Medium", "Niche" (or null).
- compatibility lists product categories / industries the IP fits.

JSON structure per item:
{{
  "ipName": "string",
  "category": "string",
  "reason": "string (why it is trending now)",
  "targetAudience": "string",
  "momentum": "Emerging | Peaking | Stabilizing | null",
  "commercialValue": "High | Medium | Niche | null",
  "buzzwords": ["string"],
  "compatibility": ["string"]
}}
""".strip()


IP_SCOUT_PROMPT = """
TARGET IP: "{ip_name}"

OBJECTIVE:
Build an IP due-diligence profile for licensing and co-branding decisions.

{rules}
- meta.currentStatus must be one of: "Active", "Dormant", "Classic".
- commercialAnalysis.tier must be one of: "S", "A", "B", "C" (S = global blockbuster).
- collabHistory: past brand collaborations, newest first, date as YYYY.MM.
- upcomingTimeline: announced releases, anniversaries, events.

JSON structure:
{{
  "meta": {{"ipName": "string", "rightsHolder": "string", "originMedium": "string", "currentStatus": "Active | Dormant | Classic"}},
  "commercialAnalysis": {{"tier": "S | A | B | C", "marketMomentum": "string", "coreAudience": "string", "brandArchetype": "string", "riskFactors": ["string"]}},
  "designElements": {{"keyColors": ["string"], "iconography": ["string"], "texturesAndMaterials": ["string"], "signatureQuotes": ["string"]}},
  "collabHistory": [{{"date": "YYYY.MM", "partner": "string", "description": "string or null"}}],
  "strategicFit": {{"bestIndustries": ["string"], "avoidIndustries": ["string"], "marketingHooks": "string"}},
  "upcomingTimeline": [{{"date": "string", "event": "string"}}]
}}
""".strip()


MATCHMAKING_PROMPT = """
BRAND: "{brand_name}"
INDUSTRY: {industry}
CAMPAIGN GOAL: {campaign_goal}
TARGET AUDIENCE: {target_audience}

OBJECTIVE:
Recommend the IPs that best fit this brand and campaign, ranked by fit.

{rules}
- matchScore is an integer from 0 to 100.
- budgetLevel must be one of: "$", "$$", "$$$" (or null).
- campaignIdea must be a concrete activation, not a slogan.

JSON structure per item:
{{
  "ipName": "string",
  "category": "string",
  "matchScore": 0,
  "whyItWorks": "string",
  "campaignIdea": "string",
  "riskFactor": "string or null",
  "budgetLevel": "$ | $$ | $$$ | null"
}}
""".strip()


AUTOCOMPLETE_PROMPT = """
KEYWORD: "{keyword}"

The user is entering one co-branding case by hand. Fields already filled in:
{current_fields}

OBJECTIVE:
Search for the co-branding case best matching the keyword and suggest values for the case fields.

{rules}
- Only suggest fields you could verify; leave the rest null.
- confidence: for every suggested field give a score between 0 and 1.
- warnings: note ambiguity (e.g. several collaborations match the keyword).
- sources: every URL you used, with its page title.

JSON structure:
{{
  "suggestedPatch": {{
    "projectName": "string or null", "brandName": "string or null", "partnerIntro": "string or null",
    "productName": "string or null", "date": "YYYY.MM.DD or null", "industry": "string or null",
    "visualStyle": "string or null", "campaignSlogan": "string or null", "impactResult": "string or null",
    "keyVisualUrl": "string or null", "rights": [{{"title": "string", "description": "string"}}],
    "insight": "string or null", "platformSource": "string or null", "sourceUrls": ["string"]
  }},
  "confidence": {{"fieldName": 0.0}},
  "warnings": ["string"],
  "sources": [{{"url": "string", "title": "string or null"}}]
}}
""".strip()


IDEA_LIST_PROMPTS = {
    "ip": "List {limit} IPs (characters, franchises, artists) that are popular co-branding partners related to \"{seed}\".",
    "brand": "List {limit} consumer brands known for co-branding campaigns related to \"{seed}\".",
    "trend_topic": "List {limit} short trend research topics worth exploring related to \"{seed}\".",
}

IDEA_LIST_SUFFIX = """
Return ONLY a JSON array of {limit} short strings in {language}. No explanations.
""".strip()


SOCIAL_POST_PROMPT = """
Write a social media post (Xiaohongshu style) that summarizes the research notebook below.

Requirements:
- title: catchy, at most 20 characters.
- content: 200-400 characters, short paragraphs, emoji, 3-5 hashtags at the end.
- Write in {language}.

Return ONLY a JSON object: {{"title": "string", "content": "string"}}

NOTEBOOK:
{notebook_markdown}
""".strip()
