#!/usr/bin/env python3
"""Simple example of using the LaTeX Structure Analyzer"""

from latex_analysis import AnalysisSession, visualize

# Create session
session = AnalysisSession()

# A document with a few mistakes
text = r"""\documentclass{article}
\begin{document}
\section{Introduction}
The variable x_1 is defined in \ref{eq:main}.
\begin{itemize}
    \item \textbf{Bold {text
\end{enumerate}
\frobnicate
\end{document}
"""

# Analyze the text
print("Analyzing document...")
result = session.analyze(text)

# Show diagnostics
print(f"\nFound {len(result.diagnostics)} problem(s):")
for diagnostic in result.diagnostics:
    print(f"\nLine {diagnostic.line} [{diagnostic.kind.value}] {diagnostic.message}")
    if diagnostic.suggestion:
        print(diagnostic.suggestion)

# Show statistics and the top of the tree
print("\nStatistics:")
for name, value in result.statistics.to_dict().items():
    print(f"   {name}: {value}")

print("\nSyntax tree (first lines):")
print("\n".join(visualize(result.tree).splitlines()[:10]))

# Save to file
session.export_results(result, "analysis.json")
session.export_results(result, "analysis.md", format="markdown")
print("\nResults saved to analysis.json and analysis.md")
