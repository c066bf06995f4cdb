"""Canned replies used when no Gemini model could answer."""

import re

_GREETING = re.compile(r"\b(hello|hi)\b")


def generate_fallback_response(message: str, assistant_name: str = "LashivGPT") -> str:
    text = message.lower()
    intro = f"I'm {assistant_name}, your specialized DevOps and Cloud Infrastructure AI assistant."

    if "chatgpt" in text or "chat gpt" in text:
        return (
            f"I'm not ChatGPT! {intro} I can help you with CI/CD, Kubernetes, AWS, Azure, "
            "GCP, security, and more. How can I assist you today?"
        )

    if _GREETING.search(text):
        return (
            f"Hello! {intro} I'm currently experiencing high demand but can help with CI/CD, "
            "Kubernetes, AWS, Azure, GCP, security, and more. Please try again in a few minutes."
        )

    if "help" in text or "what can you do" in text:
        return (
            f"I'm {assistant_name}, specialized in senior-level DevOps, Platform Engineering, "
            "and Cloud Infrastructure. I can help with:\n\n"
            "• **DevOps:** CI/CD, Kubernetes, Terraform, monitoring\n"
            "• **Cloud:** AWS, Azure, GCP, EKS, AKS, GKE\n"
            "• **Security:** DevSecOps, IAM, compliance, zero-trust\n"
            "• **Platform:** Architecture, microservices, service mesh\n"
            "• **Networking:** SDN, load balancing, security\n\n"
            "Due to high demand, responses may be delayed. Try again in a few minutes."
        )

    if "image" in text or "picture" in text or "draw" in text:
        return (
            "I can help you generate technical diagrams and infrastructure images! Try asking me to "
            "'create an image of a Kubernetes cluster architecture' or 'draw a CI/CD pipeline diagram' "
            "and I'll use the image generation feature."
        )

    if "kubernetes" in text or "k8s" in text or "docker" in text:
        return (
            "I can help with Kubernetes, Docker, and container orchestration! Topics include EKS, AKS, "
            "GKE, Helm, Operators, service mesh, and more. Please try again in a few minutes for "
            "detailed guidance."
        )

    if any(word in text for word in ("aws", "azure", "gcp", "cloud")):
        return (
            "I can help with cloud infrastructure on AWS, Azure, and GCP! Topics include EC2, EKS, "
            "Lambda, AKS, Azure DevOps, GKE, Cloud Run, and more. Please try again in a few minutes "
            "for detailed guidance."
        )

    return (
        f"I'm {assistant_name}, your DevOps and Cloud Infrastructure specialist. I'm currently "
        "experiencing high demand but can help with CI/CD, Kubernetes, cloud platforms, security, "
        "and more. Please try again in a few minutes for detailed technical guidance."
    )
