"""Contact-activity aggregation for the sales garden.

- dates: raw sheet date parsing and "latest of several columns"
- growth: per-client garden stats for one employee
- ranking: weekly leaderboard across all employees
- stages: growth stage / contact freshness classification
- rows: contact row model and sheet/record conversion
"""
