"""
Default values for RESTEX templates.

Provides shared defaults used by:
- packages.py (common package ordering and supersession)
- transformer.py (placeholders)
- preview_template.py (preview preamble and sample body)
- rendering/validator.py (recommended packages)
"""

from typing import Dict, List

DEFAULT_CONTENT_PLACEHOLDER = "%RESUME_CONTENT%"

# Substituted for images a template does not map explicitly
DEFAULT_IMAGE_PLACEHOLDER = "/placeholder-user.jpg"

# Packages injected into preview documents when the template does not declare them.
# Their names also define the "common" partition of the resolver output.
COMMON_PACKAGES: List[str] = [
    r"\usepackage[T1]{fontenc}",
    r"\usepackage[utf8]{inputenc}",
    r"\usepackage{microtype}",
    r"\usepackage[margin=1cm]{geometry}",
    r"\usepackage{fancyhdr}",
    r"\usepackage{graphicx}",
    r"\usepackage[dvipsnames]{xcolor}",
    r"\usepackage{enumitem}",
    r"\usepackage{titlesec}",
    r"\usepackage{hyperref}",
    r"\usepackage{fontawesome}",
    r"\usepackage{calc}",
    r"\usepackage{array}",
    r"\usepackage{etoolbox}",
]

# Package -> packages it makes redundant
SUPERSEDED_PACKAGES: Dict[str, List[str]] = {
    "fontspec": ["fontenc"],
    "unicode-math": ["amsmath"],
}

# Baseline packages every template should declare (advisory only)
RECOMMENDED_PACKAGES: List[str] = ["fontenc", "inputenc", "geometry"]

# Packages implied by environments/commands used in a template body
IMPLIED_PACKAGES: Dict[str, str] = {
    r"\begin{tabularx}": r"\usepackage{tabularx}",
    r"\begin{longtable}": r"\usepackage{longtable}",
}

SAMPLE_CONTENT = r"""
\section{Work Experience}
\begin{itemize}
  \item Senior Software Engineer at Tech Corp
    \begin{itemize}
      \item Led development of key features
      \item Improved system performance by 50\%
    \end{itemize}
  \item Full Stack Developer at StartUp Inc
    \begin{itemize}
      \item Developed scalable web applications
      \item Managed team of 5 developers
    \end{itemize}
\end{itemize}
"""

COMMON_LATEX_COMMANDS = r"""
% Common commands and settings
\setlength{\parindent}{0pt}
\pagestyle{empty}
\raggedbottom
\raggedright

% Custom commands for CV/Resume
\newcommand{\cvSection}[1]{\section*{#1}\vspace{-0.5em}}
\newcommand{\cvItem}[2]{\textbf{#1} & #2 \\}
\newcommand{\cvEntry}[4]{\textbf{#1} & #2 & #3 & #4 \\}
"""
