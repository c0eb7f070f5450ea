from eui_themes.cli import main

main()
