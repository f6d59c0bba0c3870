chunk_template = """
    Condense this part of an AI industry video transcript into a dense set of notes.
    Keep every concrete claim, name, product, number and prediction. Do not add commentary.

    {text}
    """

analysis_template = """
    Analyze this AI industry video transcript and provide:
    1. A concise summary (2-3 sentences)
    2. Key topics discussed (3-5 topics)
    3. Main insights and takeaways (3-5 points)
    4. Industry trends mentioned (if any)

    Video Title: {title}

    Transcript:
    {transcript}

    Respond with JSON only, using this structure:
    {{
      "summary": "...",
      "key_topics": ["topic1", "topic2"],
      "main_insights": ["insight1", "insight2"],
      "industry_trends": ["trend1", "trend2"]
    }}
    """

trend_report_template = """
    Based on these recent AI industry video transcripts, generate a comprehensive trend report that identifies:

    1. **Emerging Trends**: What new developments or themes are appearing
    2. **Recurring Topics**: What subjects are being discussed consistently
    3. **Key Players & Companies**: Which organizations are being mentioned frequently
    4. **Technology Shifts**: Any notable changes in tools, platforms, or approaches
    5. **Industry Sentiment**: Overall tone and direction of the AI industry

    Recent transcripts:
    {context}

    Provide a well-structured markdown report that would be valuable for a team tracking AI industry developments.
    """
