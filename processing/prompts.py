POEM_PROMPT = """Write a very short (2-4 lines) minimalist poem about the time \
{time_label}. The poem must rhyme and be elegant and simple. Focus on the \
specific numbers in the time. The poem should feel contemplative and precise, \
like a haiku but with rhyme. The poem MUST NOT include AM, PM, hush, shadow, \
contemplation, or derivations of these words in the response. Respond with \
ONLY the poem text, no title or explanation."""

FALLBACK_POEM = """At {time_label} the clock does chime,
Marking moments, keeping time."""
