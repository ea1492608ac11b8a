from datetime import datetime
from html import escape

from ..config import DEFAULT_CONFIG
from ..results import ScheduleResult
from .timetable import build_timetable

STYLE = """
            body {
                font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
                margin: 20px;
                background-color: #f5f5f5;
            }
            .container {
                max-width: 1400px;
                margin: 0 auto;
                background: white;
                padding: 20px;
                border-radius: 10px;
                box-shadow: 0 2px 10px rgba(0,0,0,0.1);
            }
            h1 {
                color: #2c3e50;
                text-align: center;
                margin-bottom: 30px;
            }
            table {
                border-collapse: collapse;
                width: 100%;
                margin-bottom: 20px;
            }
            th, td {
                border: 1px solid #dee2e6;
                padding: 8px;
                text-align: center;
                font-size: 13px;
            }
            th {
                background: #495057;
                color: white;
            }
            .slot-time {
                background: #e3f2fd;
                font-weight: bold;
                color: #1976d2;
            }
            .booked {
                background: #d4edda;
                border-left: 4px solid #28a745;
            }
            .clash {
                background: #f8d7da;
                border-left: 4px solid #dc3545;
            }
            .empty {
                color: #6c757d;
            }
            .stats {
                background: #e3f2fd;
                padding: 15px;
                border-radius: 8px;
                margin-bottom: 20px;
                text-align: center;
            }
            .issues li { text-align: left; }
            .timestamp {
                color: #6c757d;
                font-size: 12px;
                margin-top: 30px;
                text-align: center;
            }
"""


def create_html_schedule(result: ScheduleResult, filename="class_schedule.html", title="Class Schedule",
                         config=DEFAULT_CONFIG):
    """Write a schedule result as an HTML weekly timetable (time rows, day columns)."""
    timetable = build_timetable(result, config)
    days = list(timetable)

    html_content = f"""<!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <title>{escape(title)}</title>
        <style>{STYLE}</style>
    </head>
    <body>
        <div class="container">
            <h1>{escape(title)}</h1>
            <div class="stats">
                <p>Status: <strong>{result.status.name}</strong> |
                <strong>{len(result.schedules)}</strong> class(es) |
                <strong>{result.total_hours:g}</strong> hours/week</p>
            </div>
            <table>
                <tr><th>Time</th>{''.join(f'<th>{day}</th>' for day in days)}</tr>
    """

    # Every day has the same slot layout, so rows line up by index
    for row_index, (start, end, _) in enumerate(timetable[days[0]] if days else []):
        html_content += f'<tr><td class="slot-time">{start}-{end}</td>'
        for day in days:
            entries = timetable[day][row_index][2]
            if not entries:
                html_content += '<td class="empty">-</td>'
            else:
                css_class = "clash" if len(entries) > 1 else "booked"
                html_content += f'<td class="{css_class}">{"<br>".join(escape(entry) for entry in entries)}</td>'
        html_content += "</tr>\n"

    html_content += "</table>\n"

    issues = list(result.conflicts) + [conflict.message for conflict in result.conflict_records]
    for heading, items in (("Conflicts", issues), ("Warnings", result.warnings)):
        if items:
            html_content += f'<div class="issues"><h3>{heading}</h3><ul>'
            html_content += "".join(f"<li>{escape(item)}</li>" for item in items)
            html_content += "</ul></div>\n"

    html_content += f"""
            <div class="timestamp">
                Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
            </div>
        </div>
    </body>
    </html>
    """

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(html_content)

    return filename
