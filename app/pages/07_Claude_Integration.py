import streamlit as st

st.set_page_config(page_title="Claude Integration · MCP Server Trends", page_icon="🧩", layout="wide")
st.title("Using MCP servers with Claude")
st.caption("How to connect the servers ranked here to Claude's desktop app and command-line tools.")

desktop, cli, practices, trouble = st.tabs(["Claude Desktop", "Claude Code", "Best practices", "Troubleshooting"])

with desktop:
    st.markdown("""
1. Install Claude Desktop.
2. Install the MCP servers you want, e.g. `npm install -g @modelcontextprotocol/server-filesystem`.
3. Add them to `claude_desktop_config.json`:
   - macOS: `~/Library/Application Support/Claude/claude_desktop_config.json`
   - Windows: `%APPDATA%\\Claude\\claude_desktop_config.json`
4. Restart Claude Desktop and check the server shows up in the tools menu.
""")
    st.code("""{
  "mcpServers": {
    "filesystem": {
      "command": "npx",
      "args": ["-y", "@modelcontextprotocol/server-filesystem", "/path/to/project"]
    },
    "postgres": {
      "command": "npx",
      "args": ["-y", "@modelcontextprotocol/server-postgres"],
      "env": {"DATABASE_URL": "postgresql://..."}
    }
  }
}""", language="json")
    st.markdown("Then ask things like *“List the files in my project directory”* "
                "or *“Query my database for last week's signups”*.")

with cli:
    st.markdown("Register a server once and it is available in every session:")
    st.code("""claude mcp add filesystem -- npx -y @modelcontextprotocol/server-filesystem .
claude mcp add postgres --env DATABASE_URL=postgresql://... -- npx -y @modelcontextprotocol/server-postgres
claude mcp list""", language="bash")
    st.markdown("Use `claude mcp remove <name>` to drop one, and `/mcp` inside a session to see connection status.")

with practices:
    st.markdown("""
**Security**
- Keep API keys and passwords in environment variables, not in config files.
- Give each server the narrowest access it needs (read-only database users, a single project directory).
- Update servers regularly; check the **Server Details** page for the latest version.

**Performance**
- Prefer servers with fast startup; each one launches with the client.
- Only enable the servers you actually use in a project.
""")

with trouble:
    st.markdown("""
- **Server not listed:** validate the JSON in the config file and restart the client.
- **`command not found`:** the client's `PATH` may differ from your shell's; use absolute paths to `node`/`npx`.
- **Authentication errors:** check the `env` block and that variables are exported for the client process.
- **Slow or hanging tools:** run the server command by hand to see its logs.
""")
