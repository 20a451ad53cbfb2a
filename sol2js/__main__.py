from sol2js.cli import main

main()
