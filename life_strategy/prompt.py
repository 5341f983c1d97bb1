# ABOUTME: System instruction and user prompt for life-strategy generation.
# ABOUTME: build_prompt() is pure: questionnaire answers in, formatted prompt text out.

from collections.abc import Mapping
from datetime import date

from life_strategy.goals import GOALS_END_MARKER, GOALS_START_MARKER

NOT_PROVIDED = "Not provided"

SYSTEM_PROMPT = f"""You are a world-class life coach and strategic advisor. Your role is to create comprehensive, personalized life strategies that help people achieve happiness, health, and wealth simultaneously.

When given information about a person, create a structured, actionable strategy covering these sections:

# [Name]'s Life Strategy

## Executive Summary
A brief 2-3 sentence overview of where they are and where they're headed.

## Health & Wellness Strategy
Specific, tailored recommendations for physical and mental wellbeing based on their current fitness level, diet, and health goals.

## Career & Skills Strategy
A clear path to career growth, skill development, and professional fulfillment.

## Financial Strategy
Concrete, prioritized steps toward financial independence and wealth building based on their current situation.

## Happiness & Fulfillment Strategy
Actions to increase joy, purpose, and life satisfaction by leveraging their specific interests and values.

## 90-Day Action Plan
10-15 specific, prioritized actions to take in the next 90 days, mixing quick wins and foundation-builders. Be very specific.

## Key Mindset Shifts
2-3 mental reframes that will help them most based on their situation.

Be direct, practical, and encouraging. Use their specific details to make every recommendation highly personalized. Include realistic timelines and specific numbers where possible. Format with clear headers and bullet points.

After the strategy, append 3-6 trackable goals in exactly this format, with nothing after the closing marker:

{GOALS_START_MARKER}
{{"goals": [{{"id": "goal-1", "category": "fitness", "title": "Walk more every day", "metric": "daily steps", "unit": "steps/day", "currentValue": 4000, "targetValue": 8000, "deadline": "2025-12-31", "trackingSources": ["apple_health", "fitbit"]}}]}}
{GOALS_END_MARKER}

Rules for the goals block:
- Output strict JSON: double-quoted keys and strings, no comments, no trailing commas, no markdown fences.
- "category" is one of: health, fitness, finance, career, happiness.
- "currentValue" and "targetValue" are plain numbers taken from the person's answers where possible.
- Money goals use the unit "USD" or "USD/month".
- "deadline" is an ISO date (YYYY-MM-DD) in the future.
- "trackingSources" lists where progress could be tracked, e.g. apple_health, fitbit, google_fit, bank_account, manual."""


def system_instruction(today: date | None = None) -> str:
    """Return the system prompt with the current date so goal deadlines land in the future."""
    today = today or date.today()
    return f"{SYSTEM_PROMPT}\n\nToday's date is {today.isoformat()}."


def _value(answers: Mapping[str, str], key: str) -> str:
    return answers.get(key) or NOT_PROVIDED


def _with_suffix(answers: Mapping[str, str], key: str, suffix: str, prefix: str = "") -> str:
    value = answers.get(key)
    return f"{prefix}{value}{suffix}" if value else NOT_PROVIDED


def _height(answers: Mapping[str, str]) -> str:
    # Inches alone are not enough to describe a height.
    feet = answers.get("heightFt")
    if not feet:
        return NOT_PROVIDED
    return f"{feet}'{answers.get('heightIn') or '0'}\""


def build_prompt(answers: Mapping[str, str]) -> str:
    """Format questionnaire answers into the user prompt for the model."""
    weight_unit = answers.get("weightUnit") or ""
    weight = answers.get("weight")
    weight_text = f"{weight} {weight_unit}" if weight else NOT_PROVIDED
    target_weight = answers.get("targetWeight")
    target_weight_text = (
        f"{target_weight} {weight_unit or 'lbs'}" if target_weight else NOT_PROVIDED
    )
    name = answers.get("name") or "this person"

    return f"""Please create a comprehensive life strategy for the following person:

**Personal Information:**
- Name: {_value(answers, 'name')}
- Age: {_value(answers, 'age')}
- Weight: {weight_text}
- Height: {_height(answers)}

**Health & Wellness:**
- Fitness Level: {_value(answers, 'fitnessLevel')}
- Sleep: {_with_suffix(answers, 'sleepHours', ' hours/night')}
- Target Weight: {target_weight_text}
- Current Daily Steps: {_with_suffix(answers, 'dailySteps', ' steps/day')}
- Health Goals: {_value(answers, 'healthGoals')}
- Diet: {_value(answers, 'dietDescription')}

**Interests & Skills:**
- Hobbies: {_value(answers, 'hobbies')}
- What brings joy: {_value(answers, 'joyActivities')}
- Skills: {_value(answers, 'skills')}

**Career:**
- Occupation: {_value(answers, 'currentOccupation')}
- Experience: {_with_suffix(answers, 'yearsExperience', ' years')}
- Career Satisfaction: {_with_suffix(answers, 'careerSatisfaction', '/10')}
- Career Goals: {_value(answers, 'careerGoals')}

**Finances:**
- Annual Income: {_value(answers, 'annualIncome')}
- Net Worth: {_value(answers, 'netWorth')}
- Monthly Savings Capacity: {_with_suffix(answers, 'monthlySavings', '/month', prefix='$')}
- Financial Goals: {_value(answers, 'financialGoals')}
- Financial Challenges: {_value(answers, 'financialChallenges')}

**Life Vision:**
- Definition of happiness: {_value(answers, 'happinessDefinition')}
- 1-Year Goals: {_value(answers, 'shortTermGoals')}
- 5+ Year Goals: {_value(answers, 'longTermGoals')}
- Biggest Obstacle: {_value(answers, 'biggestObstacle')}

Please provide a detailed, actionable strategy to help {name} progress toward being happy, healthy, and wealthy. Remember to append the {GOALS_START_MARKER} block at the very end."""
