"""Instruction prompt sent with each logbook page image."""

LOGBOOK_EXTRACTION_PROMPT: str = """
You are analyzing an ACT (Australian Capital Territory) learner driver logbook page.

IMPORTANT: Extract ALL handwritten entries from this logbook page with extreme accuracy.

First, identify the page type by the header color:
- BLUE header = "RECORD OF DRIVING HOURS - DAY WITH A SUPERVISING DRIVER"
- RED header = "RECORD OF DRIVING HOURS - NIGHT WITH A SUPERVISING DRIVER"
- GREEN header = "RECORD OF DRIVING HOURS - DAY WITH AN ACT ADI"
- Grey/White with "ACT ACCREDITED DRIVER INSTRUCTOR PRACTICE" = ADI Stamp page

For each row with data, extract:
1. DATE (format: DD/MM/YYYY)
2. WEATHER CONDITIONS (if visible)
3. SUPERVISOR/ADI NAME
4. LICENCE/ADI NUMBER
5. START TIME (24hr format HH:MM)
6. FINISH TIME (24hr format HH:MM)
7. TOTAL TIME (in hours and minutes, e.g., "1:30" or "1.5")
8. Whether a signature appears present (true/false)
9. ODOMETER START (if visible)
10. ODOMETER FINISH (if visible)

Also note:
- Any entries that appear illegible (mark the field as "UNCLEAR")
- Any obvious errors (e.g., finish time before start time)
- The page subtotal if visible

Respond in this exact JSON format:
{
    "pageType": "BLUE_DAY" | "RED_NIGHT" | "GREEN_ADI" | "ADI_STAMP",
    "pageNumber": <number if visible>,
    "entries": [
        {
            "rowNumber": 1,
            "date": "DD/MM/YYYY" or "UNCLEAR",
            "weather": "string or null",
            "supervisorName": "string or UNCLEAR",
            "licenceNumber": "string or UNCLEAR",
            "startTime": "HH:MM" or "UNCLEAR",
            "finishTime": "HH:MM" or "UNCLEAR",
            "totalTime": "H:MM" or decimal hours or "UNCLEAR",
            "hasSignature": true/false,
            "odometerStart": number or null,
            "odometerFinish": number or null,
            "confidence": "high" | "medium" | "low",
            "notes": "any issues or observations"
        }
    ],
    "subtotal": "H:MM if visible on page",
    "pageNotes": "any overall observations about the page quality or issues"
}

Be extremely careful with handwritten numbers - common confusions:
- 1 vs 7
- 0 vs 6
- 4 vs 9
- 5 vs 6

If uncertain, mark confidence as "low" and add a note.
"""
