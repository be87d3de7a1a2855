"""BibleTalk GPT: bible discussion outlines and flyers over the OpenAI API."""
